"""Service wiring for the HTTP layer.

The guidance service is built once per Settings object: after
reset_settings_cache() the next request rebuilds it against the new
environment (store backend, DB path, narrative provider).
"""
from __future__ import annotations

import logging
import threading
from typing import Optional

from career_compass.core.config import Settings, get_settings
from career_compass.data_readers import json_provider
from career_compass.db.memory import (
    MemoryAnalysisHistoryStore,
    MemoryCompetencyProfileStore,
    MemoryProfileStore,
    MemoryRoadmapStore,
    MemoryRoleCatalog,
)
from career_compass.db.stores import (
    SqliteAnalysisHistoryStore,
    SqliteCompetencyProfileStore,
    SqliteProfileStore,
    SqliteRoadmapStore,
    SqliteRoleCatalog,
)
from career_compass.services.guidance import CareerGuidanceService
from career_compass.services.narrative import get_narrative_generator
from career_compass.services.roadmap import RoadmapBuilder

logger = logging.getLogger(__name__)

_lock = threading.Lock()
_service: Optional[CareerGuidanceService] = None
_service_settings: Optional[Settings] = None


# PUBLIC_INTERFACE
def build_service(settings: Settings) -> CareerGuidanceService:
    """Create a guidance service with the stores selected by DATA_PROVIDER."""
    json_provider.clear_cache()
    roles = json_provider.get_role_profiles()
    people = json_provider.get_sample_people()
    builder = RoadmapBuilder(narrative=get_narrative_generator(settings))

    if settings.data_provider == "sqlite":
        catalog = SqliteRoleCatalog()
        catalog.seed(roles)
        profiles = SqliteProfileStore()
        for person in people:
            if profiles.get_raw_records(person.person_id) is None:
                profiles.save_records(person)
        service = CareerGuidanceService(
            profiles=profiles,
            roles=catalog,
            competencies=SqliteCompetencyProfileStore(),
            roadmaps=SqliteRoadmapStore(),
            history=SqliteAnalysisHistoryStore(),
            builder=builder,
            rank_workers=settings.rank_workers,
        )
    else:
        service = CareerGuidanceService(
            profiles=MemoryProfileStore(people),
            roles=MemoryRoleCatalog(roles),
            competencies=MemoryCompetencyProfileStore(),
            roadmaps=MemoryRoadmapStore(),
            history=MemoryAnalysisHistoryStore(),
            builder=builder,
            rank_workers=settings.rank_workers,
        )
    logger.info("Guidance service ready (provider=%s, roles=%d)", settings.data_provider, len(roles))
    return service


# PUBLIC_INTERFACE
def get_service() -> CareerGuidanceService:
    """FastAPI dependency returning the guidance service for current settings."""
    global _service, _service_settings
    settings = get_settings()
    with _lock:
        if _service is None or _service_settings is not settings:
            _service = build_service(settings)
            _service_settings = settings
        return _service


# PUBLIC_INTERFACE
def reset_service_cache() -> None:
    """Forget the cached service (tests)."""
    global _service, _service_settings
    with _lock:
        _service = None
        _service_settings = None
