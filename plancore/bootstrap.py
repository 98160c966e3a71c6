"""Process start-up for applications that embed the engine.

Call ``configure()`` once before running engine operations: it resolves
``Settings`` from the environment and installs JSON logging for the
``plancore`` loggers at the profile's level.
"""

from __future__ import annotations

import logging
from typing import IO, Optional

from plancore.config import Settings, get_settings
from plancore.logging_config import setup_logging

logger = logging.getLogger(__name__)


def configure(settings: Optional[Settings] = None, stream: Optional[IO[str]] = None) -> Settings:
    settings = settings or get_settings()
    setup_logging(settings.log_level, stream=stream, static_fields={"app_env": settings.app_env})
    logger.info(
        "plancore_configured",
        extra={
            "ctx_log_level": settings.log_level,
            "ctx_max_workouts_per_day": settings.max_workouts_per_day,
            "ctx_week_alignment": settings.week_alignment,
        },
    )
    return settings
