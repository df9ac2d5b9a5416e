"""Gap analysis: where a profile falls short of a role, and where it shines."""
from __future__ import annotations

from typing import List

from career_compass.models.domain import CompetencyProfile, Gap, RoleProfile, clamp_level
from career_compass.services.taxonomy import competency_name, get_competency

IMPORTANCE_ORDER = {"CRITICAL": 0, "HIGH": 1, "MEDIUM": 2, "LOW": 3}


# PUBLIC_INTERFACE
def estimate_development_time(gap: int, importance: str) -> str:
    """Human readable time to close a gap; two months per level as the base."""
    months = gap * 2
    if importance == "CRITICAL":
        if months <= 3:
            return "2-3 months (intensive)"
        if months <= 6:
            return "4-6 months (regular)"
        return "6-12 months (long-term)"
    if importance == "HIGH":
        if months <= 4:
            return "3-4 months"
        if months <= 8:
            return "5-8 months"
        return "9-12 months"
    if importance == "MEDIUM":
        return "3-6 months" if months <= 6 else "6-12 months"
    return "6-12 months (low priority)"


# PUBLIC_INTERFACE
def analyze_gaps(profile: CompetencyProfile, role: RoleProfile) -> List[Gap]:
    """Return gaps ordered by importance, then by size (largest first)."""
    gaps: List[Gap] = []
    for req in role.requirements:
        level = profile.level_of(req.competency_id)
        diff = req.minimum_level - level
        if diff <= 0:
            continue
        comp = get_competency(req.competency_id)
        gaps.append(
            Gap(
                competency_id=req.competency_id,
                competency_name=req.competency_name or competency_name(req.competency_id),
                category=comp.category if comp else None,
                required_level=req.minimum_level,
                current_level=clamp_level(level, low=0),
                gap=diff,
                importance=req.importance,
                estimated_development_time=estimate_development_time(diff, req.importance),
            )
        )
    gaps.sort(key=lambda g: (IMPORTANCE_ORDER.get(g.importance, len(IMPORTANCE_ORDER)), -g.gap))
    return gaps


# PUBLIC_INTERFACE
def identify_strengths(profile: CompetencyProfile, role: RoleProfile) -> List[str]:
    """Display names of requirements met with room to spare (or at level 8+)."""
    strengths: List[str] = []
    for req in role.requirements:
        level = profile.level_of(req.competency_id)
        if level >= req.minimum_level and (level - req.minimum_level >= 2 or level >= 8):
            strengths.append(req.competency_name or competency_name(req.competency_id))
    return strengths
