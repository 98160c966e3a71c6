"""JSON log output for the ``plancore`` logger tree.

Engine modules log through ``logging.getLogger(__name__)`` with event-style
messages and ``ctx_*`` extras. Nothing is printed until a caller installs
the handler, normally through ``plancore.bootstrap.configure``.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import IO, Any, Optional

PACKAGE_LOGGER = "plancore"
CONTEXT_PREFIX = "ctx_"
_HANDLER_FLAG = "_plancore_json"


class JSONFormatter(logging.Formatter):
    """One JSON object per record: the event name, its context and any PlanError code."""

    def __init__(self, static_fields: Optional[dict[str, Any]] = None):
        super().__init__()
        self.static_fields = dict(static_fields or {})

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "event": record.getMessage(),
            "where": f"{record.module}.{record.funcName}:{record.lineno}",
        }
        entry.update(self.static_fields)

        error = record.exc_info[1] if record.exc_info else None
        if error is not None:
            entry["error"] = {"type": type(error).__name__, "message": str(error)}
            code = getattr(error, "code", None)
            if code:
                entry["error"]["code"] = code

        context = {
            key[len(CONTEXT_PREFIX):]: value
            for key, value in record.__dict__.items()
            if key.startswith(CONTEXT_PREFIX)
        }
        if context:
            entry["context"] = context
        return json.dumps(entry, default=str)


def _level(level: str) -> int:
    value = logging.getLevelName(str(level).upper())
    return value if isinstance(value, int) else logging.INFO


def setup_logging(
    level: str = "INFO",
    stream: Optional[IO[str]] = None,
    static_fields: Optional[dict[str, Any]] = None,
) -> logging.Handler:
    """Attach a single JSON handler to the ``plancore`` logger.

    Repeated calls only update the level and return the installed handler.
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(_level(level))

    # numeric coercion is chatty at DEBUG
    logging.getLogger(f"{PACKAGE_LOGGER}.services.aggregation").setLevel(max(logger.level, logging.INFO))

    for handler in logger.handlers:
        if getattr(handler, _HANDLER_FLAG, False):
            return handler

    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setFormatter(JSONFormatter(static_fields))
    setattr(handler, _HANDLER_FLAG, True)
    logger.addHandler(handler)
    return handler
