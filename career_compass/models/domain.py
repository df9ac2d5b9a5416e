"""Domain DTOs for competencies, roles, profiles, match results and roadmaps."""
from __future__ import annotations

import math
from datetime import datetime, timezone
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, Field, field_validator

CompetencyCategory = Literal[
    "ACADEMIC",
    "SOCIAL_EMOTIONAL",
    "TECHNICAL",
    "CREATIVE",
    "PHYSICAL",
    "LEADERSHIP",
    "COMMUNICATION",
]
RoleCategory = Literal[
    "STEM",
    "HEALTH",
    "EDUCATION",
    "BUSINESS",
    "ARTS",
    "SOCIAL_SERVICES",
    "LAW",
    "SPORTS",
    "MEDIA",
    "TRADES",
]
Importance = Literal["CRITICAL", "HIGH", "MEDIUM", "LOW"]
CompatibilityTier = Literal["EXCELLENT", "GOOD", "MODERATE", "LOW"]
DevelopmentPriority = Literal["HIGH", "MEDIUM", "LOW"]
Provenance = Literal["ACADEMIC", "SOCIAL_EMOTIONAL", "TALENTS", "SELF_ASSESSMENT", "TEACHER_ASSESSMENT"]
RoadmapStatus = Literal["ACTIVE", "COMPLETED", "ARCHIVED"]
ResourceType = Literal["COURSE", "BOOK", "ACTIVITY", "MENTORSHIP", "PRACTICE", "WORKSHOP"]

MIN_LEVEL = 1
MAX_LEVEL = 10


def clamp_level(value: float, low: int = MIN_LEVEL, high: int = MAX_LEVEL) -> int:
    """Round half up and clamp a level into [low, high]."""
    return max(low, min(high, int(math.floor(value + 0.5))))


class Competency(BaseModel):
    """Static competency definition."""
    id: str = Field(..., description="Competency identifier (e.g., MATH_SKILLS)")
    name: str = Field(..., description="Display name")
    category: CompetencyCategory = Field(..., description="Competency category")
    description: str = Field("", description="Short definition")


class RoleRequirement(BaseModel):
    """Minimum competency level a role asks for, with its weight."""
    competency_id: str = Field(..., description="Competency identifier")
    competency_name: str = Field("", description="Display name of the competency")
    minimum_level: int = Field(..., ge=MIN_LEVEL, le=MAX_LEVEL, description="Required level (1-10)")
    importance: Importance = Field(..., description="How much the role depends on it")
    weight: float = Field(..., ge=0, description="Weight used by the matching engine")


class RoleProfile(BaseModel):
    """Target role defined by weighted requirements."""
    id: str = Field(..., description="Role identifier")
    name: str = Field(..., description="Role name")
    category: RoleCategory = Field(..., description="Role category")
    description: str = Field("", description="What the role does")
    required_education: Optional[str] = Field(None, description="Typical education path")
    work_environment: Optional[str] = Field(None, description="Typical work environment")
    requirements: List[RoleRequirement] = Field(default_factory=list, description="Weighted requirements")


class CompetencyEntry(BaseModel):
    """One current competency level for a person, with provenance."""
    person_id: str = Field(..., description="Person identifier")
    competency_id: str = Field(..., description="Competency identifier")
    competency_name: str = Field(..., description="Competency display name")
    category: CompetencyCategory = Field(..., description="Competency category")
    current_level: int = Field(..., ge=MIN_LEVEL, le=MAX_LEVEL, description="Level (1-10)")
    assessed_at: str = Field(..., description="ISO timestamp of the source record")
    provenance: Provenance = Field(..., description="Raw domain the level came from")


class CompetencyProfile(BaseModel):
    """All current competency entries for one person."""
    person_id: str = Field(..., description="Person identifier")
    entries: List[CompetencyEntry] = Field(default_factory=list, description="Competency entries")

    def level_of(self, competency_id: str) -> int:
        """Return the level for a competency, or 0 when the person has none."""
        for entry in self.entries:
            if entry.competency_id == competency_id:
                return entry.current_level
        return 0

    def levels(self) -> Dict[str, int]:
        return {e.competency_id: e.current_level for e in self.entries}


class Gap(BaseModel):
    """Competency where the role asks for more than the person has."""
    competency_id: str = Field(..., description="Competency identifier")
    competency_name: str = Field(..., description="Competency display name")
    category: Optional[CompetencyCategory] = Field(None, description="Competency category")
    required_level: int = Field(..., ge=MIN_LEVEL, le=MAX_LEVEL, description="Required level")
    current_level: int = Field(..., ge=0, le=MAX_LEVEL, description="Current level (0 if absent)")
    gap: int = Field(..., gt=0, description="required_level - current_level")
    importance: Importance = Field(..., description="Requirement importance")
    estimated_development_time: str = Field(..., description="Human readable estimate")


class MatchResult(BaseModel):
    """Fit of a competency profile against one role."""
    role_id: str = Field(..., description="Role identifier")
    role_name: str = Field(..., description="Role name")
    role_category: RoleCategory = Field(..., description="Role category")
    match_score: float = Field(..., ge=0, le=100, description="Weighted coverage score (0-100)")
    compatibility_tier: CompatibilityTier = Field(..., description="Score tier")
    strengths: List[str] = Field(default_factory=list, description="Comfortably exceeded competencies")
    gaps: List[Gap] = Field(default_factory=list, description="Ordered shortfalls")
    development_priority: DevelopmentPriority = Field(..., description="How urgently to develop")


class MetricScore(BaseModel):
    """Score of one role under a selectable metric."""
    role_id: str = Field(..., description="Role identifier")
    metric: Literal["weighted", "cosine", "euclidean"] = Field(..., description="Metric used")
    score: float = Field(..., ge=0, le=100, description="Score (0-100)")


class Resource(BaseModel):
    """Learning or reference resource attached to a development step."""
    type: ResourceType = Field(..., description="Resource type")
    title: str = Field(..., description="Resource title")
    description: str = Field("", description="Short description")
    url: Optional[str] = Field(None, description="External link")
    duration: Optional[str] = Field(None, description="Expected time commitment")


class Milestone(BaseModel):
    """Intermediate target within a development step."""
    description: str = Field(..., description="What should be reached")
    target_date: str = Field(..., description="ISO date")
    success_criteria: List[str] = Field(default_factory=list, description="Qualitative criteria")


class DevelopmentStep(BaseModel):
    """Plan for closing one gap."""
    id: str = Field(..., description="Step identifier")
    competency_id: str = Field(..., description="Competency identifier")
    competency_name: str = Field(..., description="Competency display name")
    current_level: int = Field(..., ge=0, le=MAX_LEVEL, description="Starting level")
    target_level: int = Field(..., ge=MIN_LEVEL, le=MAX_LEVEL, description="Level to reach")
    priority: Importance = Field(..., description="Step priority")
    timeline: str = Field(..., description="Estimated timeline")
    strategies: List[str] = Field(default_factory=list, description="Suggested strategies")
    resources: List[Resource] = Field(default_factory=list, description="Suggested resources")
    milestones: List[Milestone] = Field(default_factory=list, description="Milestones")


class CareerRoadmap(BaseModel):
    """Staged development plan towards one target role."""
    id: str = Field(..., description="Roadmap identifier")
    person_id: str = Field(..., description="Person identifier")
    target_role_id: str = Field(..., description="Target role identifier")
    target_role_name: str = Field(..., description="Target role name")
    current_match_score: float = Field(..., ge=0, le=100, description="Score when generated")
    projected_match_score: float = Field(..., ge=0, le=100, description="Score after the plan")
    estimated_completion_time: str = Field(..., description="Overall time bucket")
    steps: List[DevelopmentStep] = Field(default_factory=list, description="Development steps")
    recommendations: List[str] = Field(default_factory=list, description="Recommendations")
    motivational_notes: List[str] = Field(default_factory=list, description="Motivational notes")
    custom_goals: List[str] = Field(default_factory=list, description="Goals supplied by the caller")
    status: RoadmapStatus = Field("ACTIVE", description="Lifecycle status")
    created_at: str = Field(..., description="ISO timestamp")
    updated_at: str = Field(..., description="ISO timestamp")


class RoadmapUpdate(BaseModel):
    """Partial roadmap update (progress tracking)."""
    current_match_score: Optional[float] = Field(None, ge=0, le=100)
    projected_match_score: Optional[float] = Field(None, ge=0, le=100)
    estimated_completion_time: Optional[str] = Field(None, min_length=1)
    steps: Optional[List[DevelopmentStep]] = None
    recommendations: Optional[List[str]] = None
    motivational_notes: Optional[List[str]] = None
    status: Optional[RoadmapStatus] = None


class CareerAnalysis(BaseModel):
    """Ranked match results for a person, with headline strengths and gaps."""
    person_id: str = Field(..., description="Person identifier")
    person_name: str = Field(..., description="Person display name")
    analyzed_at: str = Field(..., description="ISO timestamp")
    top_matches: List[MatchResult] = Field(default_factory=list, description="Best matches (max 10)")
    target_match: Optional[MatchResult] = Field(None, description="Match for the requested role")
    overall_compatibility: float = Field(..., ge=0, le=100, description="Mean of the top 5 scores")
    primary_strengths: List[str] = Field(default_factory=list, description="Strengths of the best match")
    critical_gaps: List[Gap] = Field(default_factory=list, description="Critical gaps of the best match")


class CompetencyStats(BaseModel):
    """Summary of a person's stored competency profile."""
    total: int = Field(..., ge=0)
    by_category: Dict[str, int] = Field(default_factory=dict)
    average_level: float = Field(..., ge=0, le=MAX_LEVEL)


# --- Raw profile records (read-only input to the extractor) ---

class AcademicRecord(BaseModel):
    """Latest academic signals for a person."""
    strong_subjects: List[str] = Field(default_factory=list)
    strong_skills: List[str] = Field(default_factory=list)
    overall_motivation: Optional[float] = Field(None, ge=0, description="Motivation on a 1-10 scale")
    assessed_at: str = Field(..., description="ISO timestamp")

    @field_validator("strong_subjects", "strong_skills")
    @classmethod
    def _lower_tags(cls, v: List[str]) -> List[str]:
        return [t.strip().lower() for t in v if t and t.strip()]


class SocialEmotionalRecord(BaseModel):
    """Latest social-emotional ratings (1-10) for a person."""
    empathy: Optional[int] = None
    teamwork: Optional[int] = None
    emotion_regulation: Optional[int] = None
    conflict_resolution: Optional[int] = None
    leadership: Optional[int] = None
    communication: Optional[int] = None
    assessed_at: str = Field(..., description="ISO timestamp")


class TalentsRecord(BaseModel):
    """Latest talent and interest tags for a person."""
    creative_talents: List[str] = Field(default_factory=list)
    physical_talents: List[str] = Field(default_factory=list)
    primary_interests: List[str] = Field(default_factory=list)
    assessed_at: str = Field(..., description="ISO timestamp")

    @field_validator("creative_talents", "physical_talents", "primary_interests")
    @classmethod
    def _lower_tags(cls, v: List[str]) -> List[str]:
        return [t.strip().lower() for t in v if t and t.strip()]


class MotivationRecord(BaseModel):
    """Latest motivation ratings (1-10) for a person."""
    future_orientation: Optional[int] = None
    assessed_at: str = Field(..., description="ISO timestamp")


class RawDomainRecords(BaseModel):
    """Everything the profile store knows about one person, per domain."""
    person_id: str = Field(..., description="Person identifier")
    person_name: Optional[str] = Field(None, description="Display name")
    academic: Optional[AcademicRecord] = None
    social_emotional: Optional[SocialEmotionalRecord] = None
    talents: Optional[TalentsRecord] = None
    motivation: Optional[MotivationRecord] = None


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).replace(microsecond=0).isoformat()
