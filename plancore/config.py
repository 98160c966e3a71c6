"""Engine configuration with environment-specific profiles.

Supports dev, staging, and production environments via APP_ENV.
All values can be overridden by environment variables.
"""

from __future__ import annotations

import os
from dataclasses import dataclass


@dataclass(frozen=True)
class Settings:
    """Immutable engine settings resolved from environment."""

    app_env: str = "dev"
    log_level: str = "INFO"

    # Structural caps
    max_workouts_per_day: int = 3
    max_days_per_week: int = 7

    # Status thresholds
    done_full_threshold: float = 75.0
    current_week_days: int = 7
    next_week_days: int = 14
    week_alignment: str = "rolling"  # "rolling" or "calendar"

    @property
    def is_production(self) -> bool:
        return self.app_env == "production"

    @property
    def is_dev(self) -> bool:
        return self.app_env == "dev"

    @property
    def calendar_weeks(self) -> bool:
        return self.week_alignment == "calendar"


# -- Environment profiles --

_ENV_PROFILES: dict[str, dict] = {
    "dev": {
        "log_level": "DEBUG",
    },
    "staging": {
        "log_level": "INFO",
    },
    "production": {
        "log_level": "WARNING",
    },
}

_WEEK_ALIGNMENTS = {"rolling", "calendar"}


def _week_alignment() -> str:
    value = os.getenv("WEEK_ALIGNMENT", "rolling").strip().lower()
    return value if value in _WEEK_ALIGNMENTS else "rolling"


def get_settings() -> Settings:
    """Build Settings by merging environment profile with env-var overrides."""
    app_env = os.getenv("APP_ENV", "dev")
    profile = _ENV_PROFILES.get(app_env, _ENV_PROFILES["dev"])

    return Settings(
        app_env=app_env,
        log_level=os.getenv("LOG_LEVEL", profile.get("log_level", "INFO")),
        max_workouts_per_day=int(os.getenv("MAX_WORKOUTS_PER_DAY", "3")),
        max_days_per_week=int(os.getenv("MAX_DAYS_PER_WEEK", "7")),
        done_full_threshold=float(os.getenv("DONE_FULL_THRESHOLD", "75")),
        current_week_days=int(os.getenv("CURRENT_WEEK_DAYS", "7")),
        next_week_days=int(os.getenv("NEXT_WEEK_DAYS", "14")),
        week_alignment=_week_alignment(),
    )
