"""Health and diagnostics endpoints."""
from __future__ import annotations

from fastapi import APIRouter

from career_compass.core.config import get_settings

router = APIRouter(tags=["health"])


# PUBLIC_INTERFACE
@router.get("/", summary="Health Check", description="Simple health check endpoint.", operation_id="health_check")
def health_check():
    """Return a simple health status with the active backends."""
    settings = get_settings()
    return {
        "status": "ok",
        "data_provider": settings.data_provider,
        "narrative_provider": settings.narrative_provider,
    }
