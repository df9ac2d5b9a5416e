"""
Pytest configuration to ensure the application package (career_compass/) is importable.

This adjusts sys.path so `from career_compass.api.main import app` works when
tests run from the repository root without an installed package.
"""
import sys
from datetime import date
from pathlib import Path
from typing import List, Tuple

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]

project_root_str = str(PROJECT_ROOT)
if project_root_str not in sys.path:
    sys.path.insert(0, project_root_str)

from career_compass.api import deps  # noqa: E402
from career_compass.core.config import reset_settings_cache  # noqa: E402
from career_compass.data_readers import json_provider  # noqa: E402
from career_compass.models.domain import (  # noqa: E402
    CompetencyEntry,
    CompetencyProfile,
    RoleProfile,
    RoleRequirement,
)
from career_compass.services.taxonomy import get_competency  # noqa: E402


class StubNarrative:
    """Deterministic narrative generator that records every call."""

    def __init__(self, response: str = '["First tip", "Second tip"]'):
        self.response = response
        self.calls: List[Tuple[str, float]] = []

    def complete(self, prompt, temperature, system=None):
        self.calls.append((prompt, temperature))
        return self.response


class FailingNarrative:
    def __init__(self, exc: Exception = None):
        self.exc = exc or TimeoutError("narrative timed out")

    def complete(self, prompt, temperature, system=None):
        raise self.exc


def make_profile(person_id: str = "p1", assessed_at: str = "2025-01-01T00:00:00+00:00", **levels) -> CompetencyProfile:
    entries = []
    for cid, level in levels.items():
        comp = get_competency(cid)
        entries.append(
            CompetencyEntry(
                person_id=person_id,
                competency_id=cid,
                competency_name=comp.name,
                category=comp.category,
                current_level=level,
                assessed_at=assessed_at,
                provenance="ACADEMIC",
            )
        )
    return CompetencyProfile(person_id=person_id, entries=entries)


def make_role(role_id: str = "R1", *reqs, category: str = "STEM") -> RoleProfile:
    """reqs: (competency_id, minimum_level, importance, weight) tuples."""
    return RoleProfile(
        id=role_id,
        name=role_id.title(),
        category=category,
        requirements=[
            RoleRequirement(
                competency_id=cid,
                competency_name=get_competency(cid).name,
                minimum_level=minimum,
                importance=importance,
                weight=weight,
            )
            for cid, minimum, importance, weight in reqs
        ],
    )


@pytest.fixture
def fixed_today():
    return lambda: date(2025, 1, 31)


@pytest.fixture
def isolated_env(monkeypatch, tmp_path):
    """Point settings at a throwaway SQLite file and drop all cached state."""
    monkeypatch.setenv("DB_PATH", str(tmp_path / "career_compass_test.db"))
    monkeypatch.delenv("DATA_DIR", raising=False)
    monkeypatch.setenv("NARRATIVE_PROVIDER", "none")
    reset_settings_cache()
    json_provider.clear_cache()
    deps.reset_service_cache()
    yield monkeypatch
    reset_settings_cache()
    json_provider.clear_cache()
    deps.reset_service_cache()
