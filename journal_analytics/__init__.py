"""Temporal analytics and streak computation for journal entries."""

import logging

from .core.errors import (
    AnalyticsError,
    InvalidDateKeyError,
    InvalidEntryError,
    InvalidRangeError,
)
from .core.logging import configure_logging
from .insights import AnalyticsEngine, build_snapshot
from .insights.grouping import CalendarReference, DateRange
from .insights.normalize import normalize_entries, normalize_entry
from .insights.patterns import derive_insights
from .insights.streaks import compute_streak, reconcile_cached_streak
from .schemas.analytics import AnalyticsSnapshot, StreakState
from .schemas.entry import EntryRecord
from .schemas.insights import InsightSignal

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "AnalyticsEngine",
    "AnalyticsError",
    "AnalyticsSnapshot",
    "CalendarReference",
    "DateRange",
    "EntryRecord",
    "InsightSignal",
    "InvalidDateKeyError",
    "InvalidEntryError",
    "InvalidRangeError",
    "StreakState",
    "build_snapshot",
    "compute_streak",
    "configure_logging",
    "derive_insights",
    "normalize_entries",
    "normalize_entry",
    "reconcile_cached_streak",
]
