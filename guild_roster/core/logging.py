# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
JSON line logging for the roster service.

Context attached with ``extra={...}`` (request id, account, operation) is
copied into the emitted object, so a single account's history can be
filtered out of the stream.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any

from guild_roster.core.config import settings

CONTEXT_FIELDS: tuple[str, ...] = ("request_id", "account_id", "operation")


class JSONFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "service": settings.SERVICE_NAME,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for field in CONTEXT_FIELDS:
            value = getattr(record, field, None)
            if value is not None:
                entry[field] = value
        if record.exc_info and record.exc_info[1]:
            entry["error"] = str(record.exc_info[1])
            entry["error_type"] = type(record.exc_info[1]).__name__
        return json.dumps(entry, default=str)


def get_logger(name: str | None = None) -> logging.Logger:
    """Logger writing JSON lines to stdout at ``LOG_LEVEL``."""
    logger = logging.getLogger(name or settings.SERVICE_NAME)
    if logger.handlers:
        return logger
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JSONFormatter())
    logger.addHandler(handler)
    logger.setLevel(getattr(logging, settings.LOG_LEVEL, logging.INFO))
    logger.propagate = False
    return logger
