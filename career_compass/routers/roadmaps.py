"""Roadmap progress tracking endpoints."""
from __future__ import annotations

from fastapi import APIRouter, Depends, Response, status

from career_compass.api.deps import get_service
from career_compass.models.domain import CareerRoadmap, RoadmapUpdate
from career_compass.services.guidance import CareerGuidanceService

router = APIRouter(prefix="/roadmaps", tags=["roadmaps"])


# PUBLIC_INTERFACE
@router.get("/{roadmap_id}", response_model=CareerRoadmap, summary="Get roadmap")
def get_roadmap(roadmap_id: str, service: CareerGuidanceService = Depends(get_service)):
    return service.get_roadmap(roadmap_id)


# PUBLIC_INTERFACE
@router.patch("/{roadmap_id}", response_model=CareerRoadmap, summary="Update roadmap",
              description="Partial update; only ACTIVE roadmaps may change status.")
def update_roadmap(roadmap_id: str, payload: RoadmapUpdate, service: CareerGuidanceService = Depends(get_service)):
    return service.update_roadmap(roadmap_id, payload)


# PUBLIC_INTERFACE
@router.post("/{roadmap_id}/complete", response_model=CareerRoadmap, summary="Complete roadmap")
def complete_roadmap(roadmap_id: str, service: CareerGuidanceService = Depends(get_service)):
    return service.complete_roadmap(roadmap_id)


# PUBLIC_INTERFACE
@router.delete("/{roadmap_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete roadmap")
def delete_roadmap(roadmap_id: str, service: CareerGuidanceService = Depends(get_service)):
    service.delete_roadmap(roadmap_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
