"""JSON data provider for static datasets in data/ directory.

Caches files in-memory to minimize I/O. Validates basic shapes where useful.

PySecure-4-Minimal:
- Validate input filename to prevent path traversal.
- Handle errors with structured exceptions (no stack leaks).
"""
from __future__ import annotations

import json
import logging
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List

from pydantic import ValidationError

from career_compass.core.config import get_settings
from career_compass.core.errors import InputValidationError, NotFoundError
from career_compass.models.domain import RawDomainRecords, RoleProfile
from career_compass.services.taxonomy import competency_name

logger = logging.getLogger(__name__)

DATA_EXT = ".json"
ROLE_PROFILES = "role_profiles.json"
SAMPLE_PEOPLE = "sample_people.json"


def _data_dir() -> Path:
    settings = get_settings()
    return Path(settings.data_dir).resolve()


def _validate_filename(name: str) -> str:
    if "/" in name or "\\" in name or ".." in name:
        raise InputValidationError("Invalid dataset name")
    if not name.endswith(DATA_EXT):
        raise InputValidationError("Dataset must be a .json file")
    return name


@lru_cache(maxsize=64)
def load_dataset(name: str) -> Dict[str, Any]:
    """Load a JSON dataset by filename from the configured data directory."""
    fname = _validate_filename(name)
    path = _data_dir() / fname
    if not path.exists():
        raise NotFoundError(f"Dataset not found: {fname}")
    try:
        with path.open("r", encoding="utf-8") as f:
            return json.load(f)
    except json.JSONDecodeError as exc:
        raise InputValidationError(f"Dataset parse error: {fname}") from exc


def _rows(name: str) -> List[Dict[str, Any]]:
    data = load_dataset(name)
    rows = data.get("rows") if isinstance(data, dict) else None
    if not isinstance(rows, list):
        raise InputValidationError(f"Dataset {name} has no 'rows' list")
    return rows


# PUBLIC_INTERFACE
def get_role_profiles() -> List[RoleProfile]:
    """Return the role catalog, with requirement display names resolved.

    Raises:
        InputValidationError: a role has no requirements or fails validation.
    """
    roles: List[RoleProfile] = []
    for row in _rows(ROLE_PROFILES):
        try:
            role = RoleProfile.model_validate(row)
        except ValidationError as exc:
            raise InputValidationError(f"Invalid role profile {row.get('id')!r}: {exc}") from exc
        if not role.requirements:
            raise InputValidationError(f"Role {role.id} has no requirements")
        for req in role.requirements:
            if not req.competency_name:
                req.competency_name = competency_name(req.competency_id)
        roles.append(role)
    logger.debug("Loaded %d role profiles", len(roles))
    return roles


# PUBLIC_INTERFACE
def get_sample_people() -> List[RawDomainRecords]:
    """Return the bundled raw profile records used for seeding and demos."""
    return [RawDomainRecords.model_validate(row) for row in _rows(SAMPLE_PEOPLE)]


def clear_cache() -> None:
    """Drop cached datasets (DATA_DIR may change between tests)."""
    load_dataset.cache_clear()
