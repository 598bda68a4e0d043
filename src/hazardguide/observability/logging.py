"""Structured logging for the guidance engine and its API.

Records carry the request's correlation_id (set by the API middleware) and
any location fields passed via ``extra=``. JSON output is one object per
line; text output appends the correlation id in brackets.
"""

import json
import logging
from collections.abc import Iterable
from contextvars import ContextVar
from datetime import datetime, timezone

# Propagates through await chains and thread-pool hand-offs made by FastAPI
correlation_id: ContextVar[str] = ContextVar("correlation_id", default="")

LOCATION_FIELDS = ("province", "city", "hazard", "structure_type", "step", "duration_ms")
QUIET_LOGGERS = ("httpx", "httpcore", "uvicorn.access")
TEXT_FORMAT = "%(asctime)s [%(levelname)s] %(name)s%(cid)s: %(message)s"


def get_correlation_id() -> str:
    """Return the current correlation ID, or empty string if not set."""
    return correlation_id.get()


class JSONFormatter(logging.Formatter):
    """Format log records as single-line JSON.

    Args:
        fields: record attributes copied into the entry when present.
        service: optional tag added to every entry.
    """

    def __init__(self, fields: Iterable[str] = LOCATION_FIELDS, service: str | None = None):
        super().__init__()
        self.fields = tuple(fields)
        self.service = service

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if self.service:
            entry["service"] = self.service

        cid = correlation_id.get()
        if cid:
            entry["correlation_id"] = cid

        if record.exc_info and record.exc_info[1]:
            entry["exception"] = self.formatException(record.exc_info)

        entry.update(
            (key, value)
            for key in self.fields
            if (value := getattr(record, key, None)) is not None
        )
        return json.dumps(entry, default=str)


class TextFormatter(logging.Formatter):
    """Plain text for local development, tagged with the correlation id."""

    def __init__(self):
        super().__init__(TEXT_FORMAT)

    def format(self, record: logging.LogRecord) -> str:
        cid = correlation_id.get()
        record.cid = f" [{cid}]" if cid else ""
        return super().format(record)


def setup_logging(
    json_format: bool = True,
    level: str = "INFO",
    fields: Iterable[str] = LOCATION_FIELDS,
    service: str | None = "hazardguide",
) -> None:
    """Install a single stream handler on the root logger.

    Args:
        json_format: True for JSON (production), False for text (local dev).
        level: Log level string (DEBUG, INFO, WARNING, ERROR).
        fields: extra record attributes emitted by the JSON formatter.
        service: tag added to every JSON entry.
    """
    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    root.handlers.clear()

    handler = logging.StreamHandler()
    handler.setFormatter(JSONFormatter(fields, service) if json_format else TextFormatter())
    root.addHandler(handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
