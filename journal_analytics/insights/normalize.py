from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import UTC, datetime
from typing import Any

from pydantic import ValidationError

from ..core.errors import InvalidEntryError
from ..metrics import INVALID_ENTRIES
from ..schemas.entry import EntryRecord, RawEntry

logger = logging.getLogger(__name__)

MIN_MOOD = 1
MAX_MOOD = 5


def parse_timestamp(value: Any) -> datetime:
    """Resolve a stored timestamp to an aware UTC instant.

    Naive datetimes are read as UTC, which is how the journal store writes
    ``created_at``. Anything else that is not an ISO-8601 string is rejected.
    """

    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str) and value.strip():
        text = value.strip()
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        parsed = datetime.fromisoformat(text)
    else:
        raise ValueError(f"unsupported timestamp: {value!r}")
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=UTC)
    return parsed.astimezone(UTC)


def count_words(content: str | None) -> int:
    if not content:
        return 0
    return len(content.split())


def coerce_mood(value: Any) -> int | None:
    # bool is an int subclass; a True rating is not a mood
    if isinstance(value, bool) or not isinstance(value, int):
        return None
    if MIN_MOOD <= value <= MAX_MOOD:
        return value
    return None


def _coerce_word_count(value: Any, content: str | None) -> int:
    if isinstance(value, int) and not isinstance(value, bool) and value >= 0:
        return value
    return count_words(content)


def normalize_entry(raw: Any) -> EntryRecord:
    """Convert one persisted row or mapping into an :class:`EntryRecord`."""

    try:
        view = RawEntry.model_validate(raw)
    except ValidationError as exc:
        INVALID_ENTRIES.labels(reason="shape").inc()
        entry_id = raw.get("id") if isinstance(raw, dict) else getattr(raw, "id", None)
        raise InvalidEntryError(f"entry {entry_id!r} is malformed", entry_id=entry_id) from exc

    if view.created_at is None:
        INVALID_ENTRIES.labels(reason="missing_timestamp").inc()
        raise InvalidEntryError(f"entry {view.id!r} has no created_at", entry_id=view.id)
    try:
        created_at = parse_timestamp(view.created_at)
    except ValueError as exc:
        INVALID_ENTRIES.labels(reason="bad_timestamp").inc()
        logger.warning(
            "unparseable entry timestamp",
            extra={"entry_id": str(view.id), "extra_fields": {"value": repr(view.created_at)}},
        )
        raise InvalidEntryError(
            f"entry {view.id!r} has an unparseable created_at: {view.created_at!r}",
            entry_id=view.id,
        ) from exc

    content = view.content or ""
    return EntryRecord(
        id=view.id,
        created_at=created_at,
        mood_rating=coerce_mood(view.mood_rating),
        word_count=_coerce_word_count(view.word_count, content),
        content=content,
        title=view.title,
        tags=tuple(view.tags or ()),
    )


def normalize_entries(raws: Iterable[Any]) -> list[EntryRecord]:
    return [
        raw if isinstance(raw, EntryRecord) else normalize_entry(raw)
        for raw in raws
    ]


__all__ = [
    "coerce_mood",
    "count_words",
    "normalize_entries",
    "normalize_entry",
    "parse_timestamp",
]
