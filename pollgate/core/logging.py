"""JSON-lines logging for the auth service.

Every record carries the correlation id of the request being served. Only
whitelisted ``extra`` keys reach the output, so credentials passed around as
locals never end up in a log line by accident.
"""

from __future__ import annotations

import json
import logging
import sys
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any

CORRELATION_ID_CTX: ContextVar[str] = ContextVar("correlation_id", default="")

LOG_EXTRA_FIELDS = (
    "path",
    "method",
    "status_code",
    "user_id",
    "rate_limit_key",
    "token_prefix",
)


class JsonLogFormatter(logging.Formatter):
    """One JSON object per record."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "correlation_id": CORRELATION_ID_CTX.get(),
        }
        entry.update(
            (field, getattr(record, field))
            for field in LOG_EXTRA_FIELDS
            if getattr(record, field, None) not in (None, "")
        )
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False)


def setup_logging(level: str = "INFO") -> None:
    """Route all loggers through a single stdout JSON handler."""
    handler = logging.StreamHandler(stream=sys.stdout)
    handler.setFormatter(JsonLogFormatter())
    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(getattr(logging, level.upper(), logging.INFO))


def set_correlation_id(correlation_id: str) -> None:
    CORRELATION_ID_CTX.set(correlation_id)


def token_prefix(token: str) -> str:
    """Return a log-safe prefix of an opaque token."""
    return f"{token[:8]}..." if token else ""
