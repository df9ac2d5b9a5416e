"""Competency extraction from raw profile records.

Each rule is a small pure function registered against a source domain and a
competency id. A rule receives that domain's record and returns a level, or
None when the record carries no signal for its competency. Rules never see
other domains, so a missing record simply yields no entries.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, List, Optional

from career_compass.core.errors import NotFoundError
from career_compass.db.stores import ProfileStore
from career_compass.models.domain import (
    AcademicRecord,
    CompetencyEntry,
    MotivationRecord,
    RawDomainRecords,
    SocialEmotionalRecord,
    TalentsRecord,
    clamp_level,
)
from career_compass.services.taxonomy import get_competency

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Rule:
    competency_id: str
    domain: str
    fn: Callable[[object], Optional[float]]


# domain name -> (attribute on RawDomainRecords, provenance tag)
DOMAINS: Dict[str, tuple] = {
    "academic": ("academic", "ACADEMIC"),
    "social_emotional": ("social_emotional", "SOCIAL_EMOTIONAL"),
    "motivation": ("motivation", "SOCIAL_EMOTIONAL"),
    "talents": ("talents", "TALENTS"),
}

RULES: List[Rule] = []


def rule(domain: str, *competency_ids: str):
    """Register a rule for one or more competencies fed by the same signal."""
    if domain not in DOMAINS:
        raise ValueError(f"Unknown domain: {domain}")

    def decorator(fn):
        for cid in competency_ids:
            if get_competency(cid) is None:
                raise ValueError(f"Unknown competency: {cid}")
            RULES.append(Rule(competency_id=cid, domain=domain, fn=fn))
        return fn

    return decorator


# PUBLIC_INTERFACE
def normalize(value: float, source_max: float) -> int:
    """Map a value on a 0..source_max scale onto the 1-10 level scale."""
    if source_max <= 0:
        return 1
    return clamp_level(value / source_max * 10)


def _has_any(tags: Iterable[str], wanted: set) -> bool:
    return any(t in wanted for t in tags)


def _motivation_level(rec: AcademicRecord) -> int:
    # zero or missing motivation means no signal
    value = rec.overall_motivation or 5
    return normalize(value, 10)


def _rating(value: Optional[int]) -> Optional[int]:
    return clamp_level(value) if value is not None else None


# --- academic ---

@rule("academic", "MATH_SKILLS")
def _math(rec: AcademicRecord):
    if "mathematics" in rec.strong_subjects or "problem_solving" in rec.strong_skills:
        return _motivation_level(rec)
    return None


@rule("academic", "SCIENCE_SKILLS")
def _science(rec: AcademicRecord):
    if _has_any(rec.strong_subjects, {"science", "physics", "chemistry", "biology"}):
        return _motivation_level(rec)
    return None


@rule("academic", "LANGUAGE_SKILLS")
def _language(rec: AcademicRecord):
    if _has_any(rec.strong_subjects, {"language_arts", "literature", "english"}):
        return _motivation_level(rec)
    return None


@rule("academic", "RESEARCH_SKILLS")
def _research(rec: AcademicRecord):
    return 7 if _has_any(rec.strong_skills, {"research", "information_gathering"}) else None


@rule("academic", "CRITICAL_THINKING")
def _critical_thinking(rec: AcademicRecord):
    return 7 if _has_any(rec.strong_skills, {"critical_thinking", "analytical_thinking"}) else None


@rule("academic", "WRITTEN_COMMUNICATION")
def _writing(rec: AcademicRecord):
    return 7 if _has_any(rec.strong_skills, {"writing", "composition"}) else None


# --- social-emotional ---

@rule("social_emotional", "EMPATHY")
def _empathy(rec: SocialEmotionalRecord):
    return _rating(rec.empathy)


@rule("social_emotional", "TEAMWORK")
def _teamwork(rec: SocialEmotionalRecord):
    return _rating(rec.teamwork)


@rule("social_emotional", "EMOTIONAL_REGULATION")
def _emotion_regulation(rec: SocialEmotionalRecord):
    return _rating(rec.emotion_regulation)


@rule("social_emotional", "CONFLICT_RESOLUTION")
def _conflict_resolution(rec: SocialEmotionalRecord):
    return _rating(rec.conflict_resolution)


@rule("social_emotional", "LEADERSHIP")
def _leadership(rec: SocialEmotionalRecord):
    return _rating(rec.leadership)


@rule("social_emotional", "DECISION_MAKING")
def _decision_making(rec: SocialEmotionalRecord):
    level = _rating(rec.leadership)
    return min(level + 1, 10) if level is not None and level >= 7 else None


@rule("social_emotional", "PERSUASION")
def _persuasion(rec: SocialEmotionalRecord):
    level = _rating(rec.leadership)
    return level if level is not None and level >= 7 else None


@rule("social_emotional", "VERBAL_COMMUNICATION")
def _verbal(rec: SocialEmotionalRecord):
    return _rating(rec.communication)


@rule("social_emotional", "ACTIVE_LISTENING")
def _active_listening(rec: SocialEmotionalRecord):
    level = _rating(rec.empathy)
    return level if level is not None and level >= 7 else None


# --- motivation ---

@rule("motivation", "STRATEGIC_THINKING")
def _strategic(rec: MotivationRecord):
    level = _rating(rec.future_orientation)
    return level if level is not None and level >= 7 else None


# --- talents ---

@rule("talents", "PROGRAMMING")
def _programming(rec: TalentsRecord):
    return 7 if _has_any(rec.primary_interests, {"software", "programming", "coding"}) else None


@rule("talents", "DATA_ANALYSIS")
def _data_analysis(rec: TalentsRecord):
    return 6 if _has_any(rec.primary_interests, {"data_analysis", "statistics"}) else None


@rule("talents", "TECHNICAL_DRAWING")
def _technical_drawing(rec: TalentsRecord):
    if "technical_drawing" in rec.creative_talents or "engineering" in rec.primary_interests:
        return 6
    return None


@rule("talents", "LABORATORY_SKILLS")
def _laboratory(rec: TalentsRecord):
    return 6 if _has_any(rec.primary_interests, {"laboratory", "experiments"}) else None


@rule("talents", "CREATIVITY")
def _creativity(rec: TalentsRecord):
    return min(len(rec.creative_talents) + 5, 10) if rec.creative_talents else None


@rule("talents", "ARTISTIC_ABILITY")
def _artistic(rec: TalentsRecord):
    return 7 if _has_any(rec.creative_talents, {"painting", "graphic_design", "music"}) else None


@rule("talents", "DESIGN_THINKING")
def _design(rec: TalentsRecord):
    return 7 if _has_any(rec.creative_talents, {"design", "architecture"}) else None


@rule("talents", "INNOVATION")
def _innovation(rec: TalentsRecord):
    return 8 if _has_any(rec.creative_talents, {"innovative_projects", "invention"}) else None


@rule("talents", "MANUAL_DEXTERITY", "PHYSICAL_COORDINATION")
def _manual(rec: TalentsRecord):
    return 7 if _has_any(rec.physical_talents, {"manual_skills", "precision_work"}) else None


@rule("talents", "STAMINA")
def _stamina(rec: TalentsRecord):
    return 8 if _has_any(rec.physical_talents, {"sports", "athletics", "endurance"}) else None


# PUBLIC_INTERFACE
def extract_from_records(records: RawDomainRecords) -> List[CompetencyEntry]:
    """Apply every registered rule to the records of one person.

    Duplicates across domains are kept; see deduplicate().
    """
    entries: List[CompetencyEntry] = []
    for r in RULES:
        attr, provenance = DOMAINS[r.domain]
        rec = getattr(records, attr)
        if rec is None:
            continue
        level = r.fn(rec)
        if level is None:
            continue
        comp = get_competency(r.competency_id)
        entries.append(
            CompetencyEntry(
                person_id=records.person_id,
                competency_id=comp.id,
                competency_name=comp.name,
                category=comp.category,
                current_level=clamp_level(level),
                assessed_at=rec.assessed_at,
                provenance=provenance,
            )
        )
    return entries


# PUBLIC_INTERFACE
def extract(person_id: str, profile_store: ProfileStore) -> List[CompetencyEntry]:
    """Derive competency entries for a person from the profile store.

    Raises:
        NotFoundError: the store has no records at all for this person.
    """
    records = profile_store.get_raw_records(person_id)
    if records is None:
        raise NotFoundError(f"Person not found: {person_id}")
    entries = extract_from_records(records)
    logger.debug("Extracted %d competency entries for %s", len(entries), person_id)
    return entries


# PUBLIC_INTERFACE
def deduplicate(entries: Iterable[CompetencyEntry]) -> List[CompetencyEntry]:
    """Keep one entry per competency id: the latest assessed_at, later input on ties."""
    latest: Dict[str, CompetencyEntry] = {}
    for entry in entries:
        current = latest.get(entry.competency_id)
        if current is None or entry.assessed_at >= current.assessed_at:
            latest[entry.competency_id] = entry
    return list(latest.values())
