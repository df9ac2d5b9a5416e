"""SQLite database helper and schema for the engine stores.

Only used when DATA_PROVIDER=sqlite. Otherwise, in-memory stores are used.

PySecure-4-Minimal:
- Use parameterized queries.
- Ensure connections are closed via context managers.
- Avoid logging sensitive data.
- Create DB directory if missing; initialize schema on first connect.
"""
from __future__ import annotations

import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterable, Iterator, Optional

from career_compass.core.config import get_settings


def _ensure_schema(conn: sqlite3.Connection) -> None:
    """Create the tables used by the store adapters.

    Raw profile records are stored as one JSON document per person and domain;
    the engine only ever reads them.
    """
    conn.executescript(
        """
        CREATE TABLE IF NOT EXISTS persons (
            id TEXT PRIMARY KEY,
            name TEXT
        );
        CREATE TABLE IF NOT EXISTS raw_domain_records (
            person_id TEXT NOT NULL,
            domain TEXT NOT NULL,
            payload TEXT NOT NULL,
            assessed_at TEXT NOT NULL,
            PRIMARY KEY (person_id, domain),
            FOREIGN KEY(person_id) REFERENCES persons(id)
        );

        CREATE TABLE IF NOT EXISTS role_profiles (
            id TEXT PRIMARY KEY,
            name TEXT NOT NULL,
            category TEXT NOT NULL,
            payload TEXT NOT NULL
        );

        CREATE TABLE IF NOT EXISTS competency_profiles (
            person_id TEXT NOT NULL,
            competency_id TEXT NOT NULL,
            competency_name TEXT NOT NULL,
            category TEXT NOT NULL,
            current_level INTEGER NOT NULL CHECK (current_level BETWEEN 1 AND 10),
            assessed_at TEXT NOT NULL,
            provenance TEXT NOT NULL,
            UNIQUE (person_id, competency_id)
        );

        CREATE TABLE IF NOT EXISTS career_roadmaps (
            id TEXT PRIMARY KEY,
            person_id TEXT NOT NULL,
            target_role_id TEXT NOT NULL,
            status TEXT NOT NULL CHECK (status IN ('ACTIVE', 'COMPLETED', 'ARCHIVED')),
            payload TEXT NOT NULL,
            created_at TEXT NOT NULL,
            updated_at TEXT NOT NULL
        );
        CREATE UNIQUE INDEX IF NOT EXISTS ux_career_roadmaps_active
            ON career_roadmaps(person_id) WHERE status = 'ACTIVE';

        CREATE TABLE IF NOT EXISTS career_analysis_history (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            person_id TEXT NOT NULL,
            analyzed_at TEXT NOT NULL,
            payload TEXT NOT NULL
        );
        """
    )
    conn.commit()


@contextmanager
def get_conn() -> Iterator[sqlite3.Connection]:
    settings = get_settings()
    db_path = Path(settings.db_path)
    db_path.parent.mkdir(parents=True, exist_ok=True)
    # isolation_level=None: transactions are opened explicitly by transaction().
    conn = sqlite3.connect(str(db_path), check_same_thread=False, isolation_level=None, timeout=10)
    try:
        _ensure_schema(conn)
        yield conn
    finally:
        conn.close()


@contextmanager
def transaction(conn: sqlite3.Connection) -> Iterator[sqlite3.Connection]:
    """Run a block atomically; the write lock is taken up front."""
    conn.execute("BEGIN IMMEDIATE")
    try:
        yield conn
    except BaseException:
        conn.execute("ROLLBACK")
        raise
    else:
        conn.execute("COMMIT")


def fetch_all(conn: sqlite3.Connection, query: str, params: Iterable[Any]) -> list[dict[str, Any]]:
    conn.row_factory = sqlite3.Row
    cur = conn.execute(query, list(params))
    rows = cur.fetchall()
    return [dict(r) for r in rows]


def fetch_one(conn: sqlite3.Connection, query: str, params: Iterable[Any]) -> Optional[dict[str, Any]]:
    conn.row_factory = sqlite3.Row
    cur = conn.execute(query, list(params))
    row = cur.fetchone()
    return dict(row) if row else None


def execute(conn: sqlite3.Connection, query: str, params: Iterable[Any]) -> int:
    """Execute a write and return the affected row count.

    Outside transaction() the connection is in autocommit mode.
    """
    cur = conn.execute(query, list(params))
    return cur.rowcount


# PUBLIC_INTERFACE
def reset_database() -> None:
    """Drop all rows from every engine table for test isolation."""
    with get_conn() as conn:
        with transaction(conn):
            for table in (
                "career_analysis_history",
                "career_roadmaps",
                "competency_profiles",
                "role_profiles",
                "raw_domain_records",
                "persons",
            ):
                conn.execute(f"DELETE FROM {table}")
