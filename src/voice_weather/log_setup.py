"""Logging setup: JSON lines for the service, rich output for interactive use."""

from __future__ import annotations

import json
import logging
from datetime import UTC, datetime
from typing import Any, Literal

from rich.logging import RichHandler

from .redaction import sanitize_for_logging, sanitize_text

LogFormat = Literal["json", "rich"]

# Attribute names every LogRecord carries; anything else arrived through ``extra``.
_RECORD_ATTRIBUTES = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", None, None))
) | {"message", "asctime"}


def _extra_fields(record: logging.LogRecord) -> dict[str, Any]:
    return {
        key: value
        for key, value in vars(record).items()
        if key not in _RECORD_ATTRIBUTES and not key.startswith("_")
    }


class JsonConsoleFormatter(logging.Formatter):
    """One JSON object per line; ``extra={...}`` fields are merged in, scrubbed."""

    def format(self, record: logging.LogRecord) -> str:
        event: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": sanitize_text(record.getMessage()),
        }
        event.update(sanitize_for_logging(_extra_fields(record)))
        if record.exc_info:
            event["exception"] = sanitize_text(self.formatException(record.exc_info))
        return json.dumps(event, default=str)


class _ScrubbingFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        record.msg = sanitize_text(record.getMessage())
        record.args = None
        return True


def setup_logger(
    name: str = "voice_weather",
    level: int | str = logging.INFO,
    log_format: LogFormat = "json",
) -> logging.Logger:
    """Configure the package logger once; later calls only adjust the level."""
    logger = logging.getLogger(name)
    logger.setLevel(level)
    logger.propagate = False
    if logger.handlers:
        return logger

    if log_format == "rich":
        handler: logging.Handler = RichHandler(show_path=False, rich_tracebacks=True)
        handler.addFilter(_ScrubbingFilter())
    else:
        handler = logging.StreamHandler()
        handler.setFormatter(JsonConsoleFormatter())
    logger.addHandler(handler)
    return logger
