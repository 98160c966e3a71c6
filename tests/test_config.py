"""Tests for configuration module."""

from __future__ import annotations

from plancore.config import Settings, get_settings, _ENV_PROFILES


def test_settings_dataclass():
    s = Settings()
    assert s.app_env == "dev"
    assert s.max_workouts_per_day == 3
    assert s.max_days_per_week == 7
    assert s.done_full_threshold == 75.0
    assert s.week_alignment == "rolling"


def test_settings_frozen():
    s = Settings()
    try:
        s.max_workouts_per_day = 5
        assert False, "Should raise"
    except AttributeError:
        pass


def test_settings_is_production():
    s = Settings(app_env="production")
    assert s.is_production is True
    assert s.is_dev is False


def test_settings_is_dev():
    s = Settings(app_env="dev")
    assert s.is_dev is True
    assert s.is_production is False


def test_calendar_weeks_flag():
    assert Settings(week_alignment="calendar").calendar_weeks is True
    assert Settings().calendar_weeks is False


def test_get_settings_uses_env(monkeypatch):
    monkeypatch.setenv("APP_ENV", "production")
    monkeypatch.setenv("MAX_WORKOUTS_PER_DAY", "4")
    monkeypatch.setenv("DONE_FULL_THRESHOLD", "80")
    s = get_settings()
    assert s.app_env == "production"
    assert s.max_workouts_per_day == 4
    assert s.done_full_threshold == 80.0


def test_unknown_week_alignment_falls_back_to_rolling(monkeypatch):
    monkeypatch.setenv("WEEK_ALIGNMENT", "lunar")
    assert get_settings().week_alignment == "rolling"


def test_week_alignment_from_env(monkeypatch):
    monkeypatch.setenv("WEEK_ALIGNMENT", " Calendar ")
    assert get_settings().calendar_weeks is True


def test_env_profiles_exist():
    assert "dev" in _ENV_PROFILES
    assert "staging" in _ENV_PROFILES
    assert "production" in _ENV_PROFILES


def test_dev_profile_debug_logging():
    assert _ENV_PROFILES["dev"]["log_level"] == "DEBUG"


def test_settings_profile_defaults(monkeypatch):
    monkeypatch.setenv("APP_ENV", "production")
    monkeypatch.delenv("LOG_LEVEL", raising=False)
    monkeypatch.delenv("MAX_WORKOUTS_PER_DAY", raising=False)
    s = get_settings()
    assert s.log_level == "WARNING"
    assert s.max_workouts_per_day == 3
