"""Typed failures raised for genuinely malformed input."""

from __future__ import annotations


class AnalyticsError(Exception):
    """Base class for analytics failures."""


class InvalidEntryError(AnalyticsError, ValueError):
    """An entry's timestamp is missing or cannot be parsed."""

    def __init__(self, message: str, *, entry_id: object | None = None) -> None:
        super().__init__(message)
        self.entry_id = entry_id


class InvalidDateKeyError(AnalyticsError, ValueError):
    """A date key is not a valid ``YYYY-MM-DD`` string."""

    def __init__(self, key: object) -> None:
        super().__init__(f"malformed date key: {key!r}")
        self.key = key


class InvalidRangeError(AnalyticsError, ValueError):
    """A requested date range starts after it ends."""


__all__ = [
    "AnalyticsError",
    "InvalidDateKeyError",
    "InvalidEntryError",
    "InvalidRangeError",
]
