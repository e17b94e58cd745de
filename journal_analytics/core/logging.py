from __future__ import annotations

import json
import logging
from datetime import UTC, datetime
from logging.handlers import RotatingFileHandler
from typing import Any

from .config import Settings, get_settings

PACKAGE_LOGGER = "journal_analytics"

# Attributes the engine passes through ``extra=``; anything else goes in ``extra_fields``.
STRUCTURED_FIELDS = ("entry_id", "date_key", "entries", "duration_ms")


class JsonFormatter(logging.Formatter):
    """Render analytics log records as one JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        payload.update(
            {
                field: getattr(record, field)
                for field in STRUCTURED_FIELDS
                if getattr(record, field, None) is not None
            }
        )
        extra_fields = getattr(record, "extra_fields", None)
        if isinstance(extra_fields, dict):
            payload.update(extra_fields)
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False, default=str)


def _owned(handler: logging.Handler) -> bool:
    return isinstance(handler.formatter, JsonFormatter)


def configure_logging(settings: Settings | None = None, *, console: bool = False) -> logging.Logger:
    """Send the package's records to the configured JSON log file.

    Only the ``journal_analytics`` logger is touched, so a host application's
    root configuration stays intact. Calling it again replaces the handlers
    it installed earlier instead of stacking new ones.
    """

    settings = settings or get_settings()
    logger = logging.getLogger(PACKAGE_LOGGER)
    for handler in [handler for handler in logger.handlers if _owned(handler)]:
        logger.removeHandler(handler)
        handler.close()

    formatter = JsonFormatter()
    file_handler = RotatingFileHandler(settings.log_file, maxBytes=1_000_000, backupCount=3)
    file_handler.setFormatter(formatter)
    logger.addHandler(file_handler)
    if console:
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

    logger.setLevel(settings.log_level)
    logger.propagate = False
    return logger


__all__ = ["PACKAGE_LOGGER", "STRUCTURED_FIELDS", "JsonFormatter", "configure_logging"]
