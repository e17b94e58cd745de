from __future__ import annotations

import json
import logging
from collections.abc import Generator
from datetime import UTC, datetime
from logging.handlers import RotatingFileHandler
from pathlib import Path
from types import SimpleNamespace

import pytest

from journal_analytics.core.errors import InvalidEntryError
from journal_analytics.core.logging import PACKAGE_LOGGER, JsonFormatter, configure_logging
from journal_analytics.insights.normalize import normalize_entry
from journal_analytics.insights.streaks import reconcile_cached_streak


@pytest.fixture()
def package_logger() -> Generator[logging.Logger, None, None]:
    logger = logging.getLogger(PACKAGE_LOGGER)
    handlers = list(logger.handlers)
    level, propagate = logger.level, logger.propagate
    yield logger
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        if handler not in handlers:
            handler.close()
    for handler in handlers:
        logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = propagate


@pytest.fixture()
def log_settings(tmp_path: Path) -> SimpleNamespace:
    return SimpleNamespace(log_file=tmp_path / "analytics.log", log_level="DEBUG")


def _lines(path: Path) -> list[dict]:
    for handler in logging.getLogger(PACKAGE_LOGGER).handlers:
        handler.flush()
    return [json.loads(line) for line in path.read_text(encoding="utf-8").splitlines()]


def test_configure_logging_scopes_to_package_logger(package_logger, log_settings) -> None:
    root_handlers = list(logging.getLogger().handlers)

    configure_logging(log_settings)

    file_handlers = [h for h in package_logger.handlers if isinstance(h, RotatingFileHandler)]
    assert len(file_handlers) == 1
    assert Path(file_handlers[0].baseFilename) == log_settings.log_file
    assert package_logger.level == logging.DEBUG
    assert package_logger.propagate is False
    assert logging.getLogger().handlers == root_handlers


def test_configure_logging_replaces_its_own_handlers(package_logger, log_settings) -> None:
    configure_logging(log_settings, console=True)
    handler_count = len(package_logger.handlers)

    configure_logging(log_settings, console=True)

    assert len(package_logger.handlers) == handler_count
    assert any(isinstance(h, logging.NullHandler) for h in package_logger.handlers)


def test_rejected_entry_is_logged_as_json(package_logger, log_settings) -> None:
    configure_logging(log_settings)

    with pytest.raises(InvalidEntryError):
        normalize_entry({"id": "e-7", "created_at": "yesterday"})

    (record,) = _lines(log_settings.log_file)
    assert record["level"] == "WARNING"
    assert record["logger"] == "journal_analytics.insights.normalize"
    assert record["entry_id"] == "e-7"
    assert record["value"] == "'yesterday'"


def test_streak_drift_is_logged_with_both_values(package_logger, log_settings, make_entry) -> None:
    configure_logging(log_settings)
    now = datetime(2024, 6, 10, 21, tzinfo=UTC)

    reconcile_cached_streak(5, [make_entry("2024-06-10T08:00:00")], now)

    (record,) = _lines(log_settings.log_file)
    assert record["message"] == "cached streak diverged from recomputation"
    assert record["date_key"] == "2024-06-10"
    assert record["cached_streak"] == 5
    assert record["fresh_streak"] == 1


def test_json_formatter_uses_record_time() -> None:
    formatter = JsonFormatter()
    record = logging.LogRecord(
        name="journal_analytics.insights.snapshot",
        level=logging.DEBUG,
        pathname=__file__,
        lineno=42,
        msg="analytics snapshot built",
        args=(),
        exc_info=None,
    )
    record.created = datetime(2024, 6, 10, 12, tzinfo=UTC).timestamp()
    record.entries = 3
    record.duration_ms = 1.25

    payload = json.loads(formatter.format(record))

    assert payload["ts"] == "2024-06-10T12:00:00+00:00"
    assert payload["entries"] == 3
    assert payload["duration_ms"] == 1.25
    assert "entry_id" not in payload
