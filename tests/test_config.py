from career_compass.core.config import get_settings, load_settings, reset_settings_cache


def test_defaults(monkeypatch):
    for name in ("DATA_PROVIDER", "NARRATIVE_PROVIDER", "LOG_LEVEL", "RANK_WORKERS", "NARRATIVE_TIMEOUT_SECONDS",
                 "NARRATIVE_MODEL", "OPENAI_API_KEY", "DB_PATH", "CORS_ORIGINS"):
        monkeypatch.delenv(name, raising=False)
    s = load_settings()
    assert s.data_provider == "sqlite"
    assert s.narrative_provider == "none"
    assert s.log_level == "INFO"
    assert s.rank_workers == 1
    assert s.narrative_timeout_seconds == 15.0
    assert s.narrative_model == "gpt-4o-mini"
    assert s.cors_origins == ["http://localhost:3000"]
    assert s.db_path.endswith("career_compass.db")


def test_invalid_values_fall_back(monkeypatch):
    monkeypatch.setenv("DATA_PROVIDER", "postgres")
    monkeypatch.setenv("NARRATIVE_PROVIDER", "magic")
    monkeypatch.setenv("LOG_LEVEL", "loud")
    monkeypatch.setenv("RANK_WORKERS", "64")
    monkeypatch.setenv("NARRATIVE_TIMEOUT_SECONDS", "-3")
    s = load_settings()
    assert (s.data_provider, s.narrative_provider, s.log_level) == ("sqlite", "none", "INFO")
    assert s.rank_workers == 1
    assert s.narrative_timeout_seconds == 15.0

    monkeypatch.setenv("RANK_WORKERS", "abc")
    assert load_settings().rank_workers == 1


def test_overrides(monkeypatch):
    monkeypatch.setenv("DATA_PROVIDER", "JSON")
    monkeypatch.setenv("RANK_WORKERS", "4")
    monkeypatch.setenv("CORS_ORIGINS", "http://a.test, http://b.test,")
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
    s = load_settings()
    assert s.data_provider == "json"
    assert s.rank_workers == 4
    assert s.cors_origins == ["http://a.test", "http://b.test"]
    assert "sk-test" not in repr(s)


def test_settings_cache_reset(monkeypatch):
    monkeypatch.setenv("DATA_PROVIDER", "json")
    reset_settings_cache()
    first = get_settings()
    assert get_settings() is first
    monkeypatch.setenv("DATA_PROVIDER", "sqlite")
    reset_settings_cache()
    assert get_settings().data_provider == "sqlite"
    reset_settings_cache()
