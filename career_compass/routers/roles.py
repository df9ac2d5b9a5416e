"""Role catalog endpoints."""
from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from career_compass.api.deps import get_service
from career_compass.models.domain import RoleProfile
from career_compass.services.guidance import CareerGuidanceService

router = APIRouter(prefix="/roles", tags=["roles"])


# PUBLIC_INTERFACE
@router.get("/", response_model=List[RoleProfile], summary="List roles", description="List target roles with their weighted requirements.")
def list_roles(
    category: Optional[str] = Query(None, description="Role category, e.g. STEM"),
    search: Optional[str] = Query(None, description="Case-insensitive match on id, name or description"),
    service: CareerGuidanceService = Depends(get_service),
):
    """List roles, optionally filtered by category and search term."""
    return service.list_roles(category=category, search=search)


# PUBLIC_INTERFACE
@router.get("/{role_id}", response_model=RoleProfile, summary="Get role", description="Return one role profile.")
def get_role(role_id: str, service: CareerGuidanceService = Depends(get_service)):
    return service.get_role(role_id)
