"""Per-person endpoints: competency profile, analysis and roadmaps."""
from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel, Field

from career_compass.api.deps import get_service
from career_compass.models.domain import (
    CareerAnalysis,
    CareerRoadmap,
    CompetencyProfile,
    CompetencyStats,
    MatchResult,
)
from career_compass.services.guidance import CareerGuidanceService

router = APIRouter(prefix="/people", tags=["people"])


class CompareRequest(BaseModel):
    role_ids: List[str] = Field(..., min_length=1, description="Roles to compare")


class RoadmapCreate(BaseModel):
    role_id: str = Field(..., min_length=1, description="Target role")
    custom_goals: List[str] = Field(default_factory=list, description="Goals the person set themselves")


# PUBLIC_INTERFACE
@router.get("/{person_id}/competencies", response_model=CompetencyProfile, summary="Competency profile",
            description="Return the stored competency profile, extracting it on first use.")
def get_competencies(person_id: str, service: CareerGuidanceService = Depends(get_service)):
    return service.get_profile(person_id)


# PUBLIC_INTERFACE
@router.post("/{person_id}/competencies/refresh", response_model=CompetencyProfile, summary="Refresh profile",
             description="Re-extract the competency profile from the raw records.")
def refresh_competencies(person_id: str, service: CareerGuidanceService = Depends(get_service)):
    return service.refresh_profile(person_id)


# PUBLIC_INTERFACE
@router.get("/{person_id}/competencies/stats", response_model=CompetencyStats, summary="Profile stats")
def competency_stats(person_id: str, service: CareerGuidanceService = Depends(get_service)):
    return service.competency_stats(person_id)


# PUBLIC_INTERFACE
@router.get("/{person_id}/analysis", response_model=CareerAnalysis, summary="Career analysis",
            description="Score one role (role_id) or rank the whole catalog.")
def analyze(
    person_id: str,
    role_id: Optional[str] = Query(None, description="Score only this role"),
    service: CareerGuidanceService = Depends(get_service),
):
    return service.analyze(person_id, role_id)


# PUBLIC_INTERFACE
@router.get("/{person_id}/analysis/history", response_model=List[CareerAnalysis], summary="Analysis history")
def analysis_history(
    person_id: str,
    limit: int = Query(10, ge=1, le=100),
    service: CareerGuidanceService = Depends(get_service),
):
    """Most recent analyses first."""
    return service.analysis_history(person_id, limit)


# PUBLIC_INTERFACE
@router.post("/{person_id}/compare", response_model=List[MatchResult], summary="Compare roles")
def compare(person_id: str, payload: CompareRequest, service: CareerGuidanceService = Depends(get_service)):
    return service.compare_roles(person_id, payload.role_ids)


# PUBLIC_INTERFACE
@router.post("/{person_id}/roadmaps", response_model=CareerRoadmap, status_code=status.HTTP_201_CREATED,
             summary="Generate roadmap", description="Build a roadmap and make it the active one.")
def create_roadmap(person_id: str, payload: RoadmapCreate, service: CareerGuidanceService = Depends(get_service)):
    return service.generate_roadmap(person_id, payload.role_id, payload.custom_goals)


# PUBLIC_INTERFACE
@router.get("/{person_id}/roadmaps", response_model=List[CareerRoadmap], summary="List roadmaps")
def list_roadmaps(person_id: str, service: CareerGuidanceService = Depends(get_service)):
    return service.list_roadmaps(person_id)


# PUBLIC_INTERFACE
@router.get("/{person_id}/roadmaps/active", response_model=CareerRoadmap, summary="Active roadmap")
def active_roadmap(person_id: str, service: CareerGuidanceService = Depends(get_service)):
    return service.active_roadmap(person_id)
