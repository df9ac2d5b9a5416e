"""Application configuration utilities.

This module centralizes environment configuration for the engine, including
the store backend, the optional SQLite database path, and the narrative
generator used to phrase roadmap text.

Controls:
- Do not log secrets (the OpenAI key in particular).
- Validate enum-like env values.
- Avoid crashing on missing env; provide safe defaults for dev.

Environment variables:
- DATA_PROVIDER: 'sqlite' (default) or 'json' (JSON catalog + in-memory stores)
- DB_PATH: Optional path to the sqlite database. Defaults to ./career_compass.db
  next to the package.
- DATA_DIR: Directory holding the JSON reference datasets.
- CORS_ORIGINS: Comma separated list of allowed origins.
- LOG_LEVEL: Defaults to INFO.
- NARRATIVE_PROVIDER: 'none' (default) or 'openai'
- OPENAI_API_KEY: Required for the 'openai' narrative provider.
- NARRATIVE_MODEL: Defaults to gpt-4o-mini
- NARRATIVE_TIMEOUT_SECONDS: Defaults to 15
- RANK_WORKERS: Thread pool size used when ranking the role catalog (1 = sequential).
"""
from __future__ import annotations

import os
from pathlib import Path
from typing import Literal, Optional
from pydantic import BaseModel, Field

_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


class Settings(BaseModel):
    """Configuration settings loaded from environment with secure defaults."""
    data_provider: Literal["json", "sqlite"] = Field(
        default="sqlite", description="Backend for the role catalog and engine stores."
    )
    db_path: Optional[str] = Field(
        default=None, description="SQLite DB path (used when DATA_PROVIDER=sqlite)."
    )
    cors_origins: list[str] = Field(
        default_factory=lambda: ["http://localhost:3000"],
        description="Allowed CORS origins.",
    )
    data_dir: str = Field(
        default=str(Path(__file__).resolve().parents[1] / "data"),
        description="Path to JSON data directory."
    )
    log_level: str = Field(default="INFO", description="Root log level.")
    narrative_provider: Literal["none", "openai"] = Field(
        default="none", description="Text generation backend for roadmap narratives."
    )
    openai_api_key: Optional[str] = Field(
        default=None, description="API key for the openai narrative provider.", repr=False
    )
    narrative_model: str = Field(default="gpt-4o-mini", description="Chat model name.")
    narrative_timeout_seconds: float = Field(
        default=15.0, gt=0, description="Upper bound for a single narrative call."
    )
    rank_workers: int = Field(
        default=1, ge=1, le=32, description="Worker threads used to score the role catalog."
    )


def _default_db_path() -> str:
    """Resolve the default SQLite file path next to the package."""
    return str(Path(__file__).resolve().parents[2] / "career_compass.db")


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def load_settings() -> Settings:
    """Load settings from environment with robust defaults and validation.

    Returns:
        Settings: Validated settings object.

    Raises:
        ValidationError: If environment values are invalid.
    """
    data_provider = os.getenv("DATA_PROVIDER", "sqlite").strip().lower()
    if data_provider not in {"json", "sqlite"}:
        data_provider = "sqlite"  # safe default favoring persistence

    narrative_provider = os.getenv("NARRATIVE_PROVIDER", "none").strip().lower()
    if narrative_provider not in {"none", "openai"}:
        narrative_provider = "none"

    log_level = os.getenv("LOG_LEVEL", "INFO").strip().upper()
    if log_level not in _LOG_LEVELS:
        log_level = "INFO"

    cors_origins_raw = os.getenv("CORS_ORIGINS", "http://localhost:3000")
    cors_origins = [o.strip() for o in cors_origins_raw.split(",") if o.strip()]

    db_path_env = os.getenv("DB_PATH")
    db_path = db_path_env if db_path_env else _default_db_path()

    rank_workers = _int_env("RANK_WORKERS", 1)
    if rank_workers < 1 or rank_workers > 32:
        rank_workers = 1

    timeout = _float_env("NARRATIVE_TIMEOUT_SECONDS", 15.0)
    if timeout <= 0:
        timeout = 15.0

    return Settings(
        data_provider=data_provider,  # type: ignore[arg-type]
        db_path=db_path,
        cors_origins=cors_origins,
        data_dir=os.getenv(
            "DATA_DIR",
            str(Path(__file__).resolve().parents[1] / "data")
        ),
        log_level=log_level,
        narrative_provider=narrative_provider,  # type: ignore[arg-type]
        openai_api_key=os.getenv("OPENAI_API_KEY") or None,
        narrative_model=os.getenv("NARRATIVE_MODEL", "gpt-4o-mini").strip() or "gpt-4o-mini",
        narrative_timeout_seconds=timeout,
        rank_workers=rank_workers,
    )


# Singleton-style accessor
_settings: Optional[Settings] = None

# PUBLIC_INTERFACE
def get_settings() -> Settings:
    """Get cached application settings."""
    global _settings
    if _settings is None:
        _settings = load_settings()
    return _settings

# PUBLIC_INTERFACE
def reset_settings_cache() -> None:
    """Reset the cached settings.

    This is primarily intended for tests to ensure that changes to environment
    variables (e.g., DATA_PROVIDER, DB_PATH) take effect on subsequent calls
    to get_settings().
    """
    global _settings
    _settings = None
