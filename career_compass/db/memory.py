"""In-memory store adapters (DATA_PROVIDER=json).

State lives for the life of the process. A single lock per store makes
multi-step operations such as replace_all and replace_active atomic.
"""
from __future__ import annotations

import threading
from typing import Dict, Iterable, List, Optional, Sequence

from career_compass.core.errors import NotFoundError
from career_compass.db.stores import apply_update, role_matches
from career_compass.models.domain import (
    CareerAnalysis,
    CareerRoadmap,
    CompetencyEntry,
    RawDomainRecords,
    RoadmapUpdate,
    RoleProfile,
    utc_now_iso,
)


class MemoryProfileStore:
    def __init__(self, records: Iterable[RawDomainRecords] = ()):
        self._records: Dict[str, RawDomainRecords] = {r.person_id: r for r in records}
        self._lock = threading.Lock()

    def get_raw_records(self, person_id: str) -> Optional[RawDomainRecords]:
        with self._lock:
            return self._records.get(person_id)

    def save_records(self, records: RawDomainRecords) -> None:
        with self._lock:
            self._records[records.person_id] = records


class MemoryRoleCatalog:
    def __init__(self, roles: Iterable[RoleProfile] = ()):
        self._roles: Dict[str, RoleProfile] = {r.id: r for r in roles}

    def get_by_id(self, role_id: str) -> Optional[RoleProfile]:
        return self._roles.get(role_id)

    def all(self) -> List[RoleProfile]:
        return list(self._roles.values())

    def search(self, term: str) -> List[RoleProfile]:
        return [r for r in self._roles.values() if role_matches(r, term)]

    def by_category(self, category: str) -> List[RoleProfile]:
        return [r for r in self._roles.values() if r.category == category.upper()]

    def get_many(self, role_ids: Sequence[str]) -> List[RoleProfile]:
        return [self._roles[i] for i in role_ids if i in self._roles]


class MemoryCompetencyProfileStore:
    def __init__(self):
        # person_id -> competency_id -> entry
        self._entries: Dict[str, Dict[str, CompetencyEntry]] = {}
        self._lock = threading.Lock()

    def get(self, person_id: str) -> List[CompetencyEntry]:
        with self._lock:
            return list(self._entries.get(person_id, {}).values())

    def _upsert(self, entry: CompetencyEntry) -> None:
        bucket = self._entries.setdefault(entry.person_id, {})
        current = bucket.get(entry.competency_id)
        if current is None or entry.assessed_at >= current.assessed_at:
            bucket[entry.competency_id] = entry

    def upsert_many(self, entries: Iterable[CompetencyEntry]) -> None:
        with self._lock:
            for entry in entries:
                self._upsert(entry)

    def delete_all(self, person_id: str) -> int:
        with self._lock:
            return len(self._entries.pop(person_id, {}))

    def replace_all(self, person_id: str, entries: Iterable[CompetencyEntry]) -> None:
        with self._lock:
            self._entries.pop(person_id, None)
            for entry in entries:
                if entry.person_id == person_id:
                    self._upsert(entry)


class MemoryRoadmapStore:
    def __init__(self):
        self._roadmaps: Dict[str, CareerRoadmap] = {}
        self._lock = threading.Lock()

    def _archive(self, person_id: str) -> int:
        now = utc_now_iso()
        count = 0
        for rid, rm in self._roadmaps.items():
            if rm.person_id == person_id and rm.status == "ACTIVE":
                self._roadmaps[rid] = rm.model_copy(update={"status": "ARCHIVED", "updated_at": now})
                count += 1
        return count

    def create(self, roadmap: CareerRoadmap) -> CareerRoadmap:
        with self._lock:
            self._roadmaps[roadmap.id] = roadmap
        return roadmap

    def archive_active(self, person_id: str) -> int:
        with self._lock:
            return self._archive(person_id)

    def replace_active(self, roadmap: CareerRoadmap) -> CareerRoadmap:
        with self._lock:
            self._archive(roadmap.person_id)
            self._roadmaps[roadmap.id] = roadmap
        return roadmap

    def get(self, roadmap_id: str) -> Optional[CareerRoadmap]:
        with self._lock:
            return self._roadmaps.get(roadmap_id)

    def get_active(self, person_id: str) -> Optional[CareerRoadmap]:
        with self._lock:
            for rm in self._roadmaps.values():
                if rm.person_id == person_id and rm.status == "ACTIVE":
                    return rm
        return None

    def list_for_person(self, person_id: str) -> List[CareerRoadmap]:
        with self._lock:
            items = [rm for rm in self._roadmaps.values() if rm.person_id == person_id]
        # newest first; insertion order breaks created_at ties
        return [rm for _, rm in sorted(enumerate(items), key=lambda p: (p[1].created_at, p[0]), reverse=True)]

    def update(self, roadmap_id: str, partial: RoadmapUpdate) -> CareerRoadmap:
        with self._lock:
            current = self._roadmaps.get(roadmap_id)
            if current is None:
                raise NotFoundError(f"Roadmap not found: {roadmap_id}")
            updated = apply_update(current, partial)
            self._roadmaps[roadmap_id] = updated
        return updated

    def delete(self, roadmap_id: str) -> bool:
        with self._lock:
            return self._roadmaps.pop(roadmap_id, None) is not None


class MemoryAnalysisHistoryStore:
    def __init__(self):
        self._items: Dict[str, List[CareerAnalysis]] = {}
        self._lock = threading.Lock()

    def save(self, analysis: CareerAnalysis) -> None:
        with self._lock:
            self._items.setdefault(analysis.person_id, []).append(analysis)

    def list(self, person_id: str, limit: int = 10) -> List[CareerAnalysis]:
        with self._lock:
            return list(reversed(self._items.get(person_id, [])))[:limit]
