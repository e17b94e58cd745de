from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class RawEntry(BaseModel):
    """Loose view over a persisted journal row or a plain mapping."""

    model_config = ConfigDict(from_attributes=True, extra="ignore")

    id: Any = None
    created_at: Any = None
    mood_rating: Any = None
    word_count: Any = None
    content: str | None = None
    title: str | None = None
    tags: list[str] | None = None


class EntryRecord(BaseModel):
    """Canonical, immutable journal entry."""

    model_config = ConfigDict(frozen=True)

    id: Any
    created_at: datetime
    mood_rating: int | None = Field(default=None, ge=1, le=5)
    word_count: int = Field(default=0, ge=0)
    content: str = ""
    title: str | None = None
    tags: tuple[str, ...] = ()

    @field_validator("created_at")
    @classmethod
    def _as_utc(cls, value: datetime) -> datetime:
        # naive instants are stored UTC
        if value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    @property
    def rated(self) -> bool:
        return self.mood_rating is not None


__all__ = ["EntryRecord", "RawEntry"]
