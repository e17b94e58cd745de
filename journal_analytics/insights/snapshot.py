from __future__ import annotations

import logging
import time
from collections.abc import Iterable
from datetime import UTC, datetime
from typing import Any

from ..core.config import Settings, get_settings
from ..metrics import SNAPSHOT_LATENCY, SNAPSHOTS_BUILT
from ..schemas.analytics import AnalyticsSnapshot, StreakState
from ..schemas.insights import InsightSignal
from . import aggregation
from .grouping import CalendarReference, DateRange, filter_range, to_date_key
from .normalize import normalize_entries
from .patterns import derive_insights
from .streaks import reconcile_cached_streak

logger = logging.getLogger(__name__)


class AnalyticsEngine:
    """Build dashboard analytics from a user's entries and a reference instant."""

    def __init__(
        self,
        settings: Settings | None = None,
        *,
        calendar: CalendarReference | None = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._calendar = calendar or CalendarReference.from_settings(self._settings)

    @property
    def calendar(self) -> CalendarReference:
        return self._calendar

    def build_snapshot(
        self,
        entries: Iterable[Any],
        reference_now: datetime,
        *,
        date_range: DateRange | None = None,
        cached_streak: StreakState | int | None = None,
    ) -> AnalyticsSnapshot:
        start = time.perf_counter()
        calendar = self._calendar
        now = reference_now if reference_now.tzinfo else reference_now.replace(tzinfo=UTC)
        records = normalize_entries(entries)

        today = calendar.local_date(now)
        window = date_range or DateRange.trailing(today, self._settings.default_range_days)
        in_range = filter_range(records, window, calendar)

        # Streaks always see the full history; aggregates only the window.
        streak = reconcile_cached_streak(cached_streak, records, now, calendar)
        content = aggregation.content_summary(in_range, calendar)
        hours = aggregation.hourly_distribution(in_range, calendar)

        snapshot = AnalyticsSnapshot(
            range_start=window.start,
            range_end=window.end,
            today=to_date_key(now, calendar),
            streak=streak,
            streak_analysis=aggregation.streak_analysis(in_range, streak, window, calendar),
            mood_trends=aggregation.mood_trends(in_range, calendar),
            average_mood=aggregation.average_mood(in_range),
            rated_entries=len(aggregation.rated_moods(in_range)),
            word_cloud=aggregation.word_cloud(in_range, self._settings.wordcloud_limit),
            writing_patterns=aggregation.weekday_patterns(in_range, calendar),
            time_of_day=aggregation.time_of_day_stats(in_range, calendar),
            content=content,
            growth=aggregation.growth_metrics(in_range),
            hourly_distribution=hours,
            peak_hours=aggregation.peak_hours(hours),
            mood_distribution=aggregation.mood_distribution(in_range),
            heatmap=aggregation.calendar_heatmap(in_range, window, calendar),
            weekly_trends=aggregation.period_trends(in_range, calendar, "week"),
            monthly_trends=aggregation.period_trends(in_range, calendar, "month"),
            month_summary=aggregation.month_summary(records, now, calendar),
            achievements=aggregation.achievements(
                len(records),
                aggregation.total_words(records),
                streak,
            ),
        )
        snapshot = snapshot.model_copy(update={"insights": derive_insights(snapshot)})

        elapsed = time.perf_counter() - start
        SNAPSHOTS_BUILT.inc()
        SNAPSHOT_LATENCY.observe(elapsed)
        logger.debug(
            "analytics snapshot built",
            extra={
                "entries": len(records),
                "date_key": snapshot.today,
                "duration_ms": round(elapsed * 1000, 3),
            },
        )
        return snapshot

    def insights(
        self,
        entries: Iterable[Any],
        reference_now: datetime,
        *,
        date_range: DateRange | None = None,
    ) -> list[InsightSignal]:
        return self.build_snapshot(entries, reference_now, date_range=date_range).insights


def build_snapshot(
    entries: Iterable[Any],
    reference_now: datetime,
    *,
    date_range: DateRange | None = None,
    cached_streak: StreakState | int | None = None,
) -> AnalyticsSnapshot:
    return AnalyticsEngine().build_snapshot(
        entries,
        reference_now,
        date_range=date_range,
        cached_streak=cached_streak,
    )


__all__ = ["AnalyticsEngine", "build_snapshot"]
