from __future__ import annotations

import time
from collections.abc import Callable, Generator
from datetime import UTC, datetime
from itertools import count
from types import SimpleNamespace

import pytest

from journal_analytics.core import config
from journal_analytics.schemas.entry import EntryRecord


@pytest.fixture(autouse=True)
def reset_settings_cache() -> Generator[None, None, None]:
    config.get_settings.cache_clear()
    yield
    config.get_settings.cache_clear()


@pytest.fixture()
def analytics_settings() -> SimpleNamespace:
    return SimpleNamespace(
        reference_timezone="UTC",
        week_start="sunday",
        default_range_days=90,
        wordcloud_limit=50,
    )


@pytest.fixture()
def new_york_host(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    if not hasattr(time, "tzset"):
        pytest.skip("host timezone cannot be changed on this platform")
    monkeypatch.setenv("TZ", "America/New_York")
    time.tzset()
    yield
    monkeypatch.undo()
    time.tzset()


@pytest.fixture()
def make_entry() -> Callable[..., EntryRecord]:
    ids = count(1)

    def _make(
        created_at: str | datetime,
        *,
        mood: int | None = None,
        words: int | None = None,
        content: str = "",
    ) -> EntryRecord:
        if isinstance(created_at, str):
            created_at = datetime.fromisoformat(created_at)
        if created_at.tzinfo is None:
            created_at = created_at.replace(tzinfo=UTC)
        return EntryRecord(
            id=f"entry-{next(ids)}",
            created_at=created_at,
            mood_rating=mood,
            word_count=words if words is not None else len(content.split()),
            content=content,
        )

    return _make
