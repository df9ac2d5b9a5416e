"""Matching engine: scores a competency profile against weighted role requirements.

The primary metric is weighted normalized coverage: each requirement
contributes min(level / minimum_level, 1) times its weight, and the sum is
divided by the total weight. Cosine similarity and an inverse Euclidean
distance are available for comparison views.
"""
from __future__ import annotations

import logging
import math
from concurrent.futures import ThreadPoolExecutor
from typing import Iterable, List, Optional, Sequence

from career_compass.core.errors import InputValidationError
from career_compass.models.domain import (
    CompetencyProfile,
    MatchResult,
    MetricScore,
    RoleProfile,
    RoleRequirement,
)
from career_compass.services.gaps import analyze_gaps, identify_strengths

logger = logging.getLogger(__name__)

METRICS = ("weighted", "cosine", "euclidean")

# Ranking tie-break for equal scores: LOW priority sorts first.
_PRIORITY_ORDER = {"LOW": 0, "MEDIUM": 1, "HIGH": 2}


def round1(value: float) -> float:
    """Round half up to one decimal."""
    return math.floor(value * 10 + 0.5) / 10


def normalized_coverage(level: float, requirement: RoleRequirement) -> float:
    """Share of a requirement met by a level, in [0, 1]."""
    if requirement.minimum_level <= 0:
        return 1.0
    return max(0.0, min(level / requirement.minimum_level, 1.0))


def weighted_score(profile: CompetencyProfile, requirements: Sequence[RoleRequirement]) -> float:
    """Unrounded weighted coverage score in [0, 100]."""
    if not requirements:
        return 0.0
    total_weight = sum(r.weight for r in requirements)
    if total_weight <= 0:
        return 0.0
    covered = sum(normalized_coverage(profile.level_of(r.competency_id), r) * r.weight for r in requirements)
    return covered / total_weight * 100


# PUBLIC_INTERFACE
def compatibility_tier(score: float) -> str:
    """Map a score to its tier; lower bounds are inclusive."""
    if score >= 85:
        return "EXCELLENT"
    if score >= 70:
        return "GOOD"
    if score >= 50:
        return "MODERATE"
    return "LOW"


# PUBLIC_INTERFACE
def development_priority(score: float, critical_gaps: int) -> str:
    """How urgently the person should work towards this role."""
    if score < 50 or critical_gaps > 2:
        return "HIGH"
    if score < 70 or critical_gaps > 0:
        return "MEDIUM"
    return "LOW"


# PUBLIC_INTERFACE
def score(profile: CompetencyProfile, role: RoleProfile) -> MatchResult:
    """Score one role. Pure: the same inputs always give the same result."""
    raw = weighted_score(profile, role.requirements)
    gaps = analyze_gaps(profile, role)
    critical = sum(1 for g in gaps if g.importance == "CRITICAL")
    return MatchResult(
        role_id=role.id,
        role_name=role.name,
        role_category=role.category,
        match_score=round1(raw) if raw >= 100 else min(round1(raw), 99.9),
        compatibility_tier=compatibility_tier(raw),
        strengths=identify_strengths(profile, role),
        gaps=gaps,
        development_priority=development_priority(raw, critical),
    )


def _score_all(profile: CompetencyProfile, roles: Sequence[RoleProfile], workers: int) -> List[MatchResult]:
    if workers <= 1 or len(roles) <= 1:
        return [score(profile, r) for r in roles]
    with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="rank") as pool:
        return list(pool.map(lambda r: score(profile, r), roles))


# PUBLIC_INTERFACE
def rank(
    profile: CompetencyProfile,
    roles: Iterable[RoleProfile],
    limit: Optional[int] = 10,
    workers: int = 1,
) -> List[MatchResult]:
    """Score every role and return the best matches.

    Ordered by score descending; equal scores order LOW < MEDIUM < HIGH
    development priority. The sort always runs over the complete result set,
    whether or not scoring ran on a thread pool.
    """
    roles = list(roles)
    results = _score_all(profile, roles, workers)
    results.sort(key=lambda m: (-m.match_score, _PRIORITY_ORDER[m.development_priority]))
    logger.debug("Ranked %d roles for %s", len(results), profile.person_id)
    return results[:limit] if limit is not None else results


# PUBLIC_INTERFACE
def compare(profile: CompetencyProfile, roles: Sequence[RoleProfile]) -> List[MatchResult]:
    """Score a chosen set of roles, ordered by score only."""
    if not roles:
        raise InputValidationError("At least one role is required for comparison")
    results = [score(profile, r) for r in roles]
    results.sort(key=lambda m: -m.match_score)
    return results


# PUBLIC_INTERFACE
def overall_compatibility(results: Sequence[MatchResult]) -> float:
    """Mean of the top five scores, one decimal; 0 for no results."""
    top = sorted((m.match_score for m in results), reverse=True)[:5]
    if not top:
        return 0.0
    return round1(sum(top) / len(top))


# PUBLIC_INTERFACE
def cosine_similarity(profile: CompetencyProfile, requirements: Sequence[RoleRequirement]) -> float:
    """Cosine similarity x100 over the union of competency ids."""
    person = profile.levels()
    required = {r.competency_id: r.minimum_level for r in requirements}
    ids = list(dict.fromkeys([*required, *person]))
    a = [person.get(i, 0) for i in ids]
    b = [required.get(i, 0) for i in ids]
    mag_a = math.sqrt(sum(x * x for x in a))
    mag_b = math.sqrt(sum(x * x for x in b))
    if mag_a == 0 or mag_b == 0:
        return 0.0
    dot = sum(x * y for x, y in zip(a, b))
    return dot / (mag_a * mag_b) * 100


# PUBLIC_INTERFACE
def euclidean_score(profile: CompetencyProfile, requirements: Sequence[RoleRequirement]) -> float:
    """Inverse RMS distance to the required levels, scaled to 0-100."""
    if not requirements:
        return 0.0
    sq = [(r.minimum_level - profile.level_of(r.competency_id)) ** 2 for r in requirements]
    distance = math.sqrt(sum(sq) / len(sq))
    return max(0.0, (1 - distance / 10) * 100)


# PUBLIC_INTERFACE
def score_with_metric(profile: CompetencyProfile, role: RoleProfile, metric: str = "weighted") -> MetricScore:
    """Score a role under one of the supported metrics."""
    if metric == "weighted":
        value = weighted_score(profile, role.requirements)
    elif metric == "cosine":
        value = cosine_similarity(profile, role.requirements)
    elif metric == "euclidean":
        value = euclidean_score(profile, role.requirements)
    else:
        raise InputValidationError(f"Unknown metric: {metric}. Expected one of {', '.join(METRICS)}")
    value = max(0.0, min(100.0, value))
    return MetricScore(role_id=role.id, metric=metric, score=round1(value))
