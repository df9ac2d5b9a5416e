"""Competency taxonomy endpoints."""
from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Query

from career_compass.models.domain import Competency
from career_compass.services.taxonomy import list_competencies

router = APIRouter(prefix="/competencies", tags=["competencies"])


# PUBLIC_INTERFACE
@router.get("/", response_model=List[Competency], summary="Competency taxonomy", description="Return the static competency definitions.")
def definitions(category: Optional[str] = Query(None, description="Competency category, e.g. TECHNICAL")):
    """Return competency definitions."""
    return list_competencies(category)
