"""JSON log lines for the carrier API, tagged with the request's correlation id."""

from __future__ import annotations

import json
import logging
import sys
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any

CORRELATION_ID_CTX: ContextVar[str] = ContextVar("correlation_id", default="")

# request_logging_middleware already emits one line per request
_QUIET_LOGGERS = ("uvicorn.access",)
_ROUTED_LOGGERS = ("uvicorn", "uvicorn.error")

_EXTRA_KEYS = ("user_id", "application_id", "path", "method", "status_code")


class JsonLogFormatter(logging.Formatter):
    """One JSON object per record, with request fields passed through ``extra``."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "event": record.getMessage(),
        }
        correlation_id = CORRELATION_ID_CTX.get()
        if correlation_id:
            payload["correlation_id"] = correlation_id

        payload.update(
            {
                key: getattr(record, key)
                for key in _EXTRA_KEYS
                if getattr(record, key, None) not in (None, "")
            }
        )

        if record.exc_info and record.exc_info[0] is not None:
            payload["error_type"] = record.exc_info[0].__name__
            payload["exception"] = self.formatException(record.exc_info)

        return json.dumps(payload, ensure_ascii=False, default=str)


def setup_logging(level: str = "INFO") -> None:
    """Send root and uvicorn logs to stdout as JSON at ``level``."""
    resolved = logging.getLevelName(level.upper())
    if not isinstance(resolved, int):
        resolved = logging.INFO

    handler = logging.StreamHandler(stream=sys.stdout)
    handler.setFormatter(JsonLogFormatter())
    root_logger = logging.getLogger()
    root_logger.handlers[:] = [handler]
    root_logger.setLevel(resolved)

    for name in _ROUTED_LOGGERS:
        uvicorn_logger = logging.getLogger(name)
        uvicorn_logger.handlers.clear()
        uvicorn_logger.propagate = True
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def set_correlation_id(correlation_id: str) -> None:
    CORRELATION_ID_CTX.set(correlation_id)
