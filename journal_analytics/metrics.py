from __future__ import annotations

from prometheus_client import Counter, Histogram

SNAPSHOTS_BUILT = Counter(
    "journal_analytics_snapshots_total",
    "Analytics snapshots computed",
)

SNAPSHOT_LATENCY = Histogram(
    "journal_analytics_snapshot_seconds",
    "Time spent building one analytics snapshot",
)

INVALID_ENTRIES = Counter(
    "journal_analytics_invalid_entries_total",
    "Entries rejected by the normalizer",
    ("reason",),
)

INSIGHTS_EMITTED = Counter(
    "journal_analytics_insights_total",
    "Insight signals emitted",
    ("kind",),
)

STREAK_CACHE_DRIFT = Counter(
    "journal_analytics_streak_cache_drift_total",
    "Cached streak values that disagreed with a fresh recomputation",
)

__all__ = [
    "INSIGHTS_EMITTED",
    "INVALID_ENTRIES",
    "SNAPSHOTS_BUILT",
    "SNAPSHOT_LATENCY",
    "STREAK_CACHE_DRIFT",
]
