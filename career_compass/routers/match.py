"""Ad-hoc scoring of a competency profile against a role."""
from __future__ import annotations

from typing import Annotated, Dict, Literal

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from career_compass.api.deps import get_service
from career_compass.core.errors import InputValidationError
from career_compass.models.domain import (
    CompetencyEntry,
    CompetencyProfile,
    MatchResult,
    MetricScore,
    utc_now_iso,
)
from career_compass.services import matching
from career_compass.services.guidance import CareerGuidanceService
from career_compass.services.taxonomy import get_competency

router = APIRouter(prefix="/match", tags=["match"])

_ADHOC_PERSON = "adhoc"


class ScoreRequest(BaseModel):
    role_id: str = Field(..., min_length=1, description="Role to score against")
    levels: Dict[str, Annotated[int, Field(ge=1, le=10)]] = Field(..., description="competency_id -> level (1-10)")
    metric: Literal["weighted", "cosine", "euclidean"] = Field("weighted", description="Scoring metric")


class ScoreResponse(BaseModel):
    match: MatchResult
    metric: MetricScore


def _profile(levels: Dict[str, int]) -> CompetencyProfile:
    now = utc_now_iso()
    entries = []
    for cid, level in levels.items():
        comp = get_competency(cid)
        if comp is None:
            raise InputValidationError(f"Unknown competency: {cid}")
        entries.append(
            CompetencyEntry(
                person_id=_ADHOC_PERSON,
                competency_id=cid,
                competency_name=comp.name,
                category=comp.category,
                current_level=level,
                assessed_at=now,
                provenance="SELF_ASSESSMENT",
            )
        )
    return CompetencyProfile(person_id=_ADHOC_PERSON, entries=entries)


# PUBLIC_INTERFACE
@router.post("/score", response_model=ScoreResponse, summary="Score ad-hoc profile",
             description="Score competency levels against a catalog role with the chosen metric.")
def score(payload: ScoreRequest, service: CareerGuidanceService = Depends(get_service)):
    role = service.get_role(payload.role_id)
    profile = _profile(payload.levels)
    return ScoreResponse(
        match=matching.score(profile, role),
        metric=matching.score_with_metric(profile, role, payload.metric),
    )
