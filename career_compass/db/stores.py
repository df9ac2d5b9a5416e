"""Store interfaces used by the engine, and their SQLite adapters.

Each adapter opens a short-lived connection per call through get_conn().
Operations that must not be observed half-done (profile refresh, roadmap
archive-then-create) run inside a single BEGIN IMMEDIATE transaction.
"""
from __future__ import annotations

import json
import logging
from typing import Iterable, List, Optional, Protocol, Sequence

from career_compass.core.errors import InputValidationError, NotFoundError
from career_compass.db import sqlite as sqlite_db
from career_compass.models.domain import (
    CareerAnalysis,
    CareerRoadmap,
    CompetencyEntry,
    RawDomainRecords,
    RoadmapUpdate,
    RoleProfile,
    utc_now_iso,
)

logger = logging.getLogger(__name__)

RAW_DOMAINS = ("academic", "social_emotional", "talents", "motivation")


class ProfileStore(Protocol):
    def get_raw_records(self, person_id: str) -> Optional[RawDomainRecords]: ...


class RoleCatalog(Protocol):
    def get_by_id(self, role_id: str) -> Optional[RoleProfile]: ...
    def all(self) -> List[RoleProfile]: ...
    def search(self, term: str) -> List[RoleProfile]: ...
    def by_category(self, category: str) -> List[RoleProfile]: ...
    def get_many(self, role_ids: Sequence[str]) -> List[RoleProfile]: ...


class CompetencyProfileStore(Protocol):
    def get(self, person_id: str) -> List[CompetencyEntry]: ...
    def upsert_many(self, entries: Iterable[CompetencyEntry]) -> None: ...
    def delete_all(self, person_id: str) -> int: ...
    def replace_all(self, person_id: str, entries: Iterable[CompetencyEntry]) -> None: ...


class RoadmapStore(Protocol):
    def create(self, roadmap: CareerRoadmap) -> CareerRoadmap: ...
    def archive_active(self, person_id: str) -> int: ...
    def get_active(self, person_id: str) -> Optional[CareerRoadmap]: ...
    def get(self, roadmap_id: str) -> Optional[CareerRoadmap]: ...
    def list_for_person(self, person_id: str) -> List[CareerRoadmap]: ...
    def update(self, roadmap_id: str, partial: RoadmapUpdate) -> CareerRoadmap: ...
    def delete(self, roadmap_id: str) -> bool: ...
    def replace_active(self, roadmap: CareerRoadmap) -> CareerRoadmap: ...


class AnalysisHistoryStore(Protocol):
    def save(self, analysis: CareerAnalysis) -> None: ...
    def list(self, person_id: str, limit: int = 10) -> List[CareerAnalysis]: ...


# --- helpers shared with the in-memory adapters ---

def role_matches(role: RoleProfile, term: str) -> bool:
    """Case-insensitive match on id, name and description."""
    t = term.strip().lower()
    if not t:
        return True
    return t in role.id.lower() or t in role.name.lower() or t in (role.description or "").lower()


def check_transition(current: str, new: str) -> None:
    """Only ACTIVE roadmaps may change status; other states are terminal."""
    if new == current:
        return
    if current != "ACTIVE":
        raise InputValidationError(f"Cannot change roadmap status from {current} to {new}")
    if new not in ("COMPLETED", "ARCHIVED"):
        raise InputValidationError(f"Invalid roadmap status: {new}")


def apply_update(roadmap: CareerRoadmap, partial: RoadmapUpdate) -> CareerRoadmap:
    """Return a copy of the roadmap with the set fields of the update applied."""
    changes = partial.model_dump(exclude_unset=True, exclude_none=True)
    if "status" in changes:
        check_transition(roadmap.status, changes["status"])
    if "steps" in changes:
        changes["steps"] = partial.steps
    changes["updated_at"] = utc_now_iso()
    return roadmap.model_copy(update=changes)


# --- SQLite adapters ---

class SqliteProfileStore:
    """Raw domain records kept as JSON documents per person and domain."""

    def get_raw_records(self, person_id: str) -> Optional[RawDomainRecords]:
        with sqlite_db.get_conn() as conn:
            person = sqlite_db.fetch_one(conn, "SELECT id, name FROM persons WHERE id = ?", (person_id,))
            if not person:
                return None
            rows = sqlite_db.fetch_all(
                conn, "SELECT domain, payload FROM raw_domain_records WHERE person_id = ?", (person_id,)
            )
        data = {"person_id": person["id"], "person_name": person["name"]}
        for row in rows:
            if row["domain"] in RAW_DOMAINS:
                data[row["domain"]] = json.loads(row["payload"])
        return RawDomainRecords.model_validate(data)

    def save_records(self, records: RawDomainRecords) -> None:
        with sqlite_db.get_conn() as conn, sqlite_db.transaction(conn):
            conn.execute(
                "INSERT INTO persons (id, name) VALUES (?, ?) "
                "ON CONFLICT(id) DO UPDATE SET name = excluded.name",
                (records.person_id, records.person_name),
            )
            for domain in RAW_DOMAINS:
                rec = getattr(records, domain)
                if rec is None:
                    continue
                conn.execute(
                    "INSERT INTO raw_domain_records (person_id, domain, payload, assessed_at) VALUES (?, ?, ?, ?) "
                    "ON CONFLICT(person_id, domain) DO UPDATE SET payload = excluded.payload, "
                    "assessed_at = excluded.assessed_at",
                    (records.person_id, domain, rec.model_dump_json(), rec.assessed_at),
                )


class SqliteRoleCatalog:
    """Role catalog table, seeded from the bundled JSON dataset."""

    def seed(self, roles: Iterable[RoleProfile]) -> int:
        count = 0
        with sqlite_db.get_conn() as conn, sqlite_db.transaction(conn):
            for role in roles:
                conn.execute(
                    "INSERT INTO role_profiles (id, name, category, payload) VALUES (?, ?, ?, ?) "
                    "ON CONFLICT(id) DO UPDATE SET name = excluded.name, category = excluded.category, "
                    "payload = excluded.payload",
                    (role.id, role.name, role.category, role.model_dump_json()),
                )
                count += 1
        logger.info("Seeded %d role profiles", count)
        return count

    def _load(self, query: str, params: Sequence) -> List[RoleProfile]:
        with sqlite_db.get_conn() as conn:
            rows = sqlite_db.fetch_all(conn, query, params)
        return [RoleProfile.model_validate_json(r["payload"]) for r in rows]

    def get_by_id(self, role_id: str) -> Optional[RoleProfile]:
        found = self._load("SELECT payload FROM role_profiles WHERE id = ?", (role_id,))
        return found[0] if found else None

    def all(self) -> List[RoleProfile]:
        return self._load("SELECT payload FROM role_profiles ORDER BY rowid", ())

    def search(self, term: str) -> List[RoleProfile]:
        return [r for r in self.all() if role_matches(r, term)]

    def by_category(self, category: str) -> List[RoleProfile]:
        return self._load(
            "SELECT payload FROM role_profiles WHERE category = ? ORDER BY rowid", (category.upper(),)
        )

    def get_many(self, role_ids: Sequence[str]) -> List[RoleProfile]:
        by_id = {r.id: r for r in self.all()}
        return [by_id[i] for i in role_ids if i in by_id]


_ENTRY_COLUMNS = "person_id, competency_id, competency_name, category, current_level, assessed_at, provenance"
_UPSERT_ENTRY = (
    f"INSERT INTO competency_profiles ({_ENTRY_COLUMNS}) VALUES (?, ?, ?, ?, ?, ?, ?) "
    "ON CONFLICT(person_id, competency_id) DO UPDATE SET "
    "competency_name = excluded.competency_name, category = excluded.category, "
    "current_level = excluded.current_level, assessed_at = excluded.assessed_at, "
    "provenance = excluded.provenance "
    "WHERE excluded.assessed_at >= competency_profiles.assessed_at"
)


def _entry_params(e: CompetencyEntry) -> tuple:
    return (e.person_id, e.competency_id, e.competency_name, e.category, e.current_level, e.assessed_at, e.provenance)


class SqliteCompetencyProfileStore:
    """One row per (person, competency); upserts keep the latest assessment."""

    def get(self, person_id: str) -> List[CompetencyEntry]:
        with sqlite_db.get_conn() as conn:
            rows = sqlite_db.fetch_all(
                conn,
                f"SELECT {_ENTRY_COLUMNS} FROM competency_profiles WHERE person_id = ? ORDER BY rowid",
                (person_id,),
            )
        return [CompetencyEntry(**r) for r in rows]

    def upsert_many(self, entries: Iterable[CompetencyEntry]) -> None:
        with sqlite_db.get_conn() as conn, sqlite_db.transaction(conn):
            conn.executemany(_UPSERT_ENTRY, [_entry_params(e) for e in entries])

    def delete_all(self, person_id: str) -> int:
        with sqlite_db.get_conn() as conn:
            return sqlite_db.execute(conn, "DELETE FROM competency_profiles WHERE person_id = ?", (person_id,))

    def replace_all(self, person_id: str, entries: Iterable[CompetencyEntry]) -> None:
        params = [_entry_params(e) for e in entries if e.person_id == person_id]
        with sqlite_db.get_conn() as conn, sqlite_db.transaction(conn):
            conn.execute("DELETE FROM competency_profiles WHERE person_id = ?", (person_id,))
            conn.executemany(_UPSERT_ENTRY, params)


class SqliteRoadmapStore:
    """Roadmaps as JSON documents; status is mirrored in a column for the ACTIVE index."""

    @staticmethod
    def _insert(conn, roadmap: CareerRoadmap) -> None:
        conn.execute(
            "INSERT INTO career_roadmaps (id, person_id, target_role_id, status, payload, created_at, updated_at) "
            "VALUES (?, ?, ?, ?, ?, ?, ?)",
            (roadmap.id, roadmap.person_id, roadmap.target_role_id, roadmap.status,
             roadmap.model_dump_json(), roadmap.created_at, roadmap.updated_at),
        )

    @staticmethod
    def _archive(conn, person_id: str) -> int:
        rows = sqlite_db.fetch_all(
            conn, "SELECT id, payload FROM career_roadmaps WHERE person_id = ? AND status = 'ACTIVE'", (person_id,)
        )
        now = utc_now_iso()
        for row in rows:
            archived = CareerRoadmap.model_validate_json(row["payload"]).model_copy(
                update={"status": "ARCHIVED", "updated_at": now}
            )
            conn.execute(
                "UPDATE career_roadmaps SET status = 'ARCHIVED', payload = ?, updated_at = ? WHERE id = ?",
                (archived.model_dump_json(), now, row["id"]),
            )
        return len(rows)

    def create(self, roadmap: CareerRoadmap) -> CareerRoadmap:
        with sqlite_db.get_conn() as conn, sqlite_db.transaction(conn):
            self._insert(conn, roadmap)
        return roadmap

    def archive_active(self, person_id: str) -> int:
        with sqlite_db.get_conn() as conn, sqlite_db.transaction(conn):
            return self._archive(conn, person_id)

    def replace_active(self, roadmap: CareerRoadmap) -> CareerRoadmap:
        with sqlite_db.get_conn() as conn, sqlite_db.transaction(conn):
            archived = self._archive(conn, roadmap.person_id)
            self._insert(conn, roadmap)
        logger.debug("Archived %d roadmap(s) for %s", archived, roadmap.person_id)
        return roadmap

    def _select(self, query: str, params: Sequence) -> List[CareerRoadmap]:
        with sqlite_db.get_conn() as conn:
            rows = sqlite_db.fetch_all(conn, query, params)
        return [CareerRoadmap.model_validate_json(r["payload"]) for r in rows]

    def get(self, roadmap_id: str) -> Optional[CareerRoadmap]:
        found = self._select("SELECT payload FROM career_roadmaps WHERE id = ?", (roadmap_id,))
        return found[0] if found else None

    def get_active(self, person_id: str) -> Optional[CareerRoadmap]:
        found = self._select(
            "SELECT payload FROM career_roadmaps WHERE person_id = ? AND status = 'ACTIVE'", (person_id,)
        )
        return found[0] if found else None

    def list_for_person(self, person_id: str) -> List[CareerRoadmap]:
        return self._select(
            "SELECT payload FROM career_roadmaps WHERE person_id = ? ORDER BY created_at DESC, rowid DESC",
            (person_id,),
        )

    def update(self, roadmap_id: str, partial: RoadmapUpdate) -> CareerRoadmap:
        with sqlite_db.get_conn() as conn, sqlite_db.transaction(conn):
            row = sqlite_db.fetch_one(conn, "SELECT payload FROM career_roadmaps WHERE id = ?", (roadmap_id,))
            if not row:
                raise NotFoundError(f"Roadmap not found: {roadmap_id}")
            updated = apply_update(CareerRoadmap.model_validate_json(row["payload"]), partial)
            conn.execute(
                "UPDATE career_roadmaps SET status = ?, payload = ?, updated_at = ? WHERE id = ?",
                (updated.status, updated.model_dump_json(), updated.updated_at, roadmap_id),
            )
        return updated

    def delete(self, roadmap_id: str) -> bool:
        with sqlite_db.get_conn() as conn:
            return sqlite_db.execute(conn, "DELETE FROM career_roadmaps WHERE id = ?", (roadmap_id,)) > 0


class SqliteAnalysisHistoryStore:
    def save(self, analysis: CareerAnalysis) -> None:
        with sqlite_db.get_conn() as conn:
            sqlite_db.execute(
                conn,
                "INSERT INTO career_analysis_history (person_id, analyzed_at, payload) VALUES (?, ?, ?)",
                (analysis.person_id, analysis.analyzed_at, analysis.model_dump_json()),
            )

    def list(self, person_id: str, limit: int = 10) -> List[CareerAnalysis]:
        with sqlite_db.get_conn() as conn:
            rows = sqlite_db.fetch_all(
                conn,
                "SELECT payload FROM career_analysis_history WHERE person_id = ? ORDER BY id DESC LIMIT ?",
                (person_id, limit),
            )
        return [CareerAnalysis.model_validate_json(r["payload"]) for r in rows]
