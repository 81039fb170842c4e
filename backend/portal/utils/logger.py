"""
Structured Logging

Every record is one JSON line carrying the request's correlation id and
whichever portal identifiers the caller passed through ``extra``.
"""
import json
import logging
import os
import sys
from contextvars import ContextVar
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from typing import Any, Dict, Optional

from ..config.settings import settings

_correlation_id: ContextVar[Optional[str]] = ContextVar("portal_correlation_id", default=None)

# Identifiers lifted from ``extra={...}`` into the JSON line
CONTEXT_FIELDS = (
    "application_id", "upload_id", "queue_id", "document_id", "notification_id",
    "holder_id", "actor_id", "action", "status", "step", "strategy", "error_code",
)

LOG_FILE_MAX_BYTES = 10 * 1024 * 1024
LOG_FILE_BACKUPS = 5

QUIET_LOGGERS = {
    "uvicorn": logging.INFO,
    "uvicorn.access": logging.WARNING,
    "httpx": logging.WARNING,
    "pymongo": logging.WARNING,
}


class JsonFormatter(logging.Formatter):
    """One JSON object per record"""

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc)
            .isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        correlation_id = _correlation_id.get()
        if correlation_id:
            payload["correlation_id"] = correlation_id

        payload.update({
            name: record.__dict__[name] for name in CONTEXT_FIELDS if name in record.__dict__
        })

        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)

        return json.dumps(payload, default=str)


def _file_handler(filename: str, level: int = logging.NOTSET) -> RotatingFileHandler:
    handler = RotatingFileHandler(
        os.path.join(settings.logs_path, filename),
        maxBytes=LOG_FILE_MAX_BYTES,
        backupCount=LOG_FILE_BACKUPS,
        encoding="utf-8"
    )
    handler.setLevel(level)
    return handler


def setup_logging() -> None:
    """
    Route the root logger to stdout, ``app.log`` and ``error.log``.

    Safe to call more than once; existing root handlers are replaced.
    """
    os.makedirs(settings.logs_path, exist_ok=True)

    root = logging.getLogger()
    root.setLevel(settings.log_level.upper())
    root.handlers.clear()

    formatter = JsonFormatter()
    for handler in (
        logging.StreamHandler(sys.stdout),
        _file_handler("app.log"),
        _file_handler("error.log", logging.ERROR),
    ):
        handler.setFormatter(formatter)
        root.addHandler(handler)

    for name, level in QUIET_LOGGERS.items():
        logging.getLogger(name).setLevel(level)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def set_correlation_id(correlation_id: Optional[str]) -> None:
    """Bind a correlation id to the current request context"""
    _correlation_id.set(correlation_id)


def get_correlation_id() -> Optional[str]:
    return _correlation_id.get()
