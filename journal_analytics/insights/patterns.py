from __future__ import annotations

from collections.abc import Callable

from ..metrics import INSIGHTS_EMITTED
from ..schemas.analytics import AnalyticsSnapshot, TimeOfDay, TimeOfDayStat
from ..schemas.insights import InsightSignal
from .policy import (
    FAVORITE_DAY_RATIO,
    MAX_INSIGHTS,
    MIN_RATED_ENTRIES,
    MIN_TOP_WORD_MENTIONS,
    MOOD_DIFFERENCE_THRESHOLD,
    POSITIVE_MOOD_THRESHOLD,
    STREAK_INSIGHT_DAYS,
    TIME_PREFERENCE_RATIO,
    VERBOSE_WORDS_PER_ENTRY,
)


def _bucket(snapshot: AnalyticsSnapshot, bucket: TimeOfDay) -> TimeOfDayStat:
    return next(stat for stat in snapshot.time_of_day if stat.bucket == bucket)


def favorite_weekday(snapshot: AnalyticsSnapshot) -> InsightSignal | None:
    active = sorted(
        (pattern for pattern in snapshot.writing_patterns if pattern.entry_count > 0),
        key=lambda pattern: (-pattern.entry_count, pattern.weekday),
    )
    if len(active) < 2:
        return None
    top, runner_up = active[0], active[1]
    if top.entry_count <= runner_up.entry_count * FAVORITE_DAY_RATIO:
        return None
    return InsightSignal(
        category="pattern",
        kind="favorite_weekday",
        signal={
            "weekday": top.weekday,
            "day_name": top.day_name,
            "count": top.entry_count,
            "runner_up_count": runner_up.entry_count,
            "ratio": round(top.entry_count / runner_up.entry_count, 2),
        },
    )


def preferred_time(snapshot: AnalyticsSnapshot) -> InsightSignal | None:
    morning = _bucket(snapshot, TimeOfDay.MORNING).entry_count
    evening = _bucket(snapshot, TimeOfDay.EVENING).entry_count
    if morning > evening * TIME_PREFERENCE_RATIO:
        preferred = TimeOfDay.MORNING
    elif evening > morning * TIME_PREFERENCE_RATIO:
        preferred = TimeOfDay.EVENING
    else:
        return None
    return InsightSignal(
        category="timing",
        kind="preferred_time",
        signal={
            "preferred": preferred.value,
            "morning_count": morning,
            "evening_count": evening,
        },
    )


def mood_by_time(snapshot: AnalyticsSnapshot) -> InsightSignal | None:
    morning = _bucket(snapshot, TimeOfDay.MORNING)
    evening = _bucket(snapshot, TimeOfDay.EVENING)
    if morning.rated_count == 0 or evening.rated_count == 0:
        return None
    difference = morning.average_mood - evening.average_mood
    if abs(difference) <= MOOD_DIFFERENCE_THRESHOLD:
        return None
    return InsightSignal(
        category="mood",
        kind="morning_better" if difference > 0 else "evening_better",
        signal={
            "morning_mood": morning.average_mood,
            "evening_mood": evening.average_mood,
            "difference": abs(difference),
        },
    )


def sustained_positive_mood(snapshot: AnalyticsSnapshot) -> InsightSignal | None:
    if snapshot.rated_entries < MIN_RATED_ENTRIES:
        return None
    if snapshot.average_mood < POSITIVE_MOOD_THRESHOLD:
        return None
    return InsightSignal(
        category="mood",
        kind="sustained_positive",
        signal={
            "average_mood": snapshot.average_mood,
            "rated_entries": snapshot.rated_entries,
        },
    )


def verbosity(snapshot: AnalyticsSnapshot) -> InsightSignal | None:
    average_words = snapshot.content.average_words_per_entry
    if average_words <= VERBOSE_WORDS_PER_ENTRY:
        return None
    return InsightSignal(
        category="content",
        kind="verbose_writer",
        signal={
            "average_words": round(average_words),
            "total_entries": snapshot.content.total_entries,
        },
    )


def streak_momentum(snapshot: AnalyticsSnapshot) -> InsightSignal | None:
    current = snapshot.streak.current_streak
    if current < STREAK_INSIGHT_DAYS:
        return None
    return InsightSignal(
        category="pattern",
        kind="streak_momentum",
        signal={"current_streak": current},
    )


def top_word(snapshot: AnalyticsSnapshot) -> InsightSignal | None:
    if not snapshot.word_cloud:
        return None
    top = snapshot.word_cloud[0]
    if top.frequency < MIN_TOP_WORD_MENTIONS:
        return None
    return InsightSignal(
        category="content",
        kind="top_word",
        signal={"word": top.word, "mentions": top.frequency},
    )


RULES: tuple[Callable[[AnalyticsSnapshot], InsightSignal | None], ...] = (
    favorite_weekday,
    preferred_time,
    mood_by_time,
    sustained_positive_mood,
    verbosity,
    streak_momentum,
    top_word,
)


def derive_insights(snapshot: AnalyticsSnapshot) -> list[InsightSignal]:
    """Evaluate every rule independently and keep the first few that fire."""

    fired = [signal for rule in RULES if (signal := rule(snapshot)) is not None]
    selected = fired[:MAX_INSIGHTS]
    for signal in selected:
        INSIGHTS_EMITTED.labels(kind=signal.kind).inc()
    return selected


__all__ = [
    "RULES",
    "derive_insights",
    "favorite_weekday",
    "mood_by_time",
    "preferred_time",
    "streak_momentum",
    "sustained_positive_mood",
    "top_word",
    "verbosity",
]
