from __future__ import annotations

import re
from collections import Counter
from collections.abc import Iterable, Sequence
from datetime import datetime
from typing import Literal

from ..schemas.analytics import (
    Achievement,
    ContentSummary,
    GrowthMetrics,
    HeatmapCell,
    HourCount,
    MonthSummary,
    MoodBucket,
    MoodDistribution,
    MoodTrendPoint,
    PeriodTrend,
    StreakAnalysis,
    StreakState,
    TimeOfDay,
    TimeOfDayStat,
    WeekdayPattern,
    WordCloudItem,
)
from ..schemas.entry import EntryRecord
from . import policy
from .grouping import (
    TIME_OF_DAY_ORDER,
    UTC_CALENDAR,
    WEEKDAY_NAMES,
    CalendarReference,
    DateRange,
    active_date_keys,
    group_by_day,
    group_by_month,
    group_by_week,
    month_key_of,
    parse_date_key,
    previous_month_key,
    time_of_day,
)
from .streaks import compute_longest_streak

_NON_WORD_RE = re.compile(r"[^\w\s]", flags=re.UNICODE)
_STOPWORDS = {
    "the",
    "and",
    "or",
    "but",
    "in",
    "on",
    "at",
    "to",
    "for",
    "of",
    "with",
    "by",
    "from",
    "as",
    "is",
    "was",
    "are",
    "were",
    "be",
    "been",
    "have",
    "has",
    "had",
    "do",
    "does",
    "did",
    "will",
    "would",
    "could",
    "should",
    "may",
    "might",
    "must",
    "can",
    "a",
    "an",
    "this",
    "that",
    "these",
    "those",
    "i",
    "you",
    "he",
    "she",
    "it",
    "we",
    "they",
    "me",
    "him",
    "her",
    "us",
    "them",
    "my",
    "your",
    "his",
    "its",
    "our",
    "their",
}
_POSITIVE_WORDS = {"happy", "grateful", "excited", "love", "joy", "amazing", "wonderful", "great"}
_NEGATIVE_WORDS = {"sad", "angry", "frustrated", "worried", "stressed", "anxious", "difficult"}


def _mean(values: Sequence[float]) -> float:
    if not values:
        return 0.0
    return sum(values) / len(values)


def rated_moods(entries: Iterable[EntryRecord]) -> list[int]:
    return [entry.mood_rating for entry in entries if entry.mood_rating is not None]


def average_mood(entries: Iterable[EntryRecord]) -> float:
    """Mean rating over rated entries; 0.0 when nothing is rated."""

    return _mean(rated_moods(entries))


def total_words(entries: Iterable[EntryRecord]) -> int:
    return sum(entry.word_count for entry in entries)


def consistency_score(active_days: int, date_range: DateRange) -> float:
    return max(0.0, min(1.0, active_days / date_range.days))


def month_over_month(current_count: int, previous_count: int) -> float:
    """Percentage change in entry count against the previous month.

    An empty previous month reads as +100% when the current one has entries
    and 0% when both are empty.
    """

    if previous_count == 0:
        return 100.0 if current_count > 0 else 0.0
    return ((current_count - previous_count) / previous_count) * 100


def dominant_time_of_day(counts: Counter[TimeOfDay]) -> TimeOfDay | None:
    if not counts:
        return None
    # max keeps the first of equal candidates, so declaration order breaks ties
    return max(TIME_OF_DAY_ORDER, key=lambda bucket: counts.get(bucket, 0))


def content_summary(
    entries: Sequence[EntryRecord],
    calendar: CalendarReference = UTC_CALENDAR,
) -> ContentSummary:
    words = total_words(entries)
    day_words: Counter[int] = Counter()
    for entry in entries:
        day_words[calendar.local_date(entry.created_at).weekday()] += entry.word_count
    most_productive = None
    if day_words:
        weekday = max(sorted(day_words), key=lambda index: day_words[index])
        most_productive = WEEKDAY_NAMES[weekday]
    return ContentSummary(
        total_entries=len(entries),
        total_words=words,
        average_words_per_entry=words / len(entries) if entries else 0.0,
        most_productive_day=most_productive,
        reading_time_minutes=words / policy.WORDS_PER_MINUTE,
    )


def streak_analysis(
    entries: Iterable[EntryRecord],
    streak: StreakState,
    date_range: DateRange | None = None,
    calendar: CalendarReference = UTC_CALENDAR,
) -> StreakAnalysis:
    days = sorted(parse_date_key(key) for key in active_date_keys(entries, calendar))
    if not days:
        return StreakAnalysis(
            current_streak=streak.current_streak,
            longest_streak=streak.longest_streak,
            last_active_date_key=streak.last_active_date_key,
            average_gap_between_entries=0.0,
            consistency=0.0,
        )
    span = (days[-1] - days[0]).days
    window = date_range or DateRange(days[0], days[-1])
    return StreakAnalysis(
        current_streak=streak.current_streak,
        longest_streak=streak.longest_streak,
        last_active_date_key=streak.last_active_date_key,
        average_gap_between_entries=span / (len(days) - 1) if len(days) > 1 else 0.0,
        consistency=consistency_score(len(days), window),
    )


def mood_trends(
    entries: Iterable[EntryRecord],
    calendar: CalendarReference = UTC_CALENDAR,
) -> list[MoodTrendPoint]:
    points = []
    for key, items in group_by_day(entries, calendar).items():
        moods = rated_moods(items)
        if not moods:
            continue
        points.append(
            MoodTrendPoint(date_key=key, average_mood=_mean(moods), entry_count=len(moods))
        )
    return points


def weekday_patterns(
    entries: Iterable[EntryRecord],
    calendar: CalendarReference = UTC_CALENDAR,
) -> list[WeekdayPattern]:
    by_weekday: dict[int, list[EntryRecord]] = {index: [] for index in range(7)}
    for entry in entries:
        by_weekday[calendar.local_date(entry.created_at).weekday()].append(entry)

    patterns = []
    for index, items in by_weekday.items():
        buckets = Counter(time_of_day(entry.created_at, calendar) for entry in items)
        patterns.append(
            WeekdayPattern(
                weekday=index,
                day_name=WEEKDAY_NAMES[index],
                entry_count=len(items),
                average_word_count=_mean([entry.word_count for entry in items]),
                average_mood=average_mood(items),
                preferred_time=dominant_time_of_day(buckets),
            )
        )
    return patterns


def time_of_day_stats(
    entries: Iterable[EntryRecord],
    calendar: CalendarReference = UTC_CALENDAR,
) -> list[TimeOfDayStat]:
    buckets: dict[TimeOfDay, list[EntryRecord]] = {bucket: [] for bucket in TIME_OF_DAY_ORDER}
    for entry in entries:
        buckets[time_of_day(entry.created_at, calendar)].append(entry)
    return [
        TimeOfDayStat(
            bucket=bucket,
            entry_count=len(items),
            rated_count=len(rated_moods(items)),
            average_mood=average_mood(items),
        )
        for bucket, items in buckets.items()
    ]


def period_trends(
    entries: Iterable[EntryRecord],
    calendar: CalendarReference = UTC_CALENDAR,
    period: Literal["week", "month"] = "week",
) -> list[PeriodTrend]:
    if period == "week":
        grouped = group_by_week(entries, calendar)
    else:
        grouped = group_by_month(entries, calendar)
    trends = []
    for key, items in grouped.items():
        words = total_words(items)
        trends.append(
            PeriodTrend(
                period_key=key,
                entry_count=len(items),
                total_words=words,
                average_words=words / len(items),
            )
        )
    return trends


def _sentiment(word: str) -> Literal["positive", "neutral", "negative"]:
    if word in _POSITIVE_WORDS:
        return "positive"
    if word in _NEGATIVE_WORDS:
        return "negative"
    return "neutral"


def word_cloud(entries: Iterable[EntryRecord], limit: int = 50) -> list[WordCloudItem]:
    words: Counter[str] = Counter()
    for entry in entries:
        tokens = _NON_WORD_RE.sub("", entry.content.lower()).split()
        for token in tokens:
            if len(token) <= 3:
                continue
            if token in _STOPWORDS:
                continue
            words[token] += 1
    ranked = sorted(words.items(), key=lambda item: (-item[1], item[0]))
    return [
        WordCloudItem(word=word, frequency=count, sentiment=_sentiment(word))
        for word, count in ranked[:limit]
    ]


def hourly_distribution(
    entries: Iterable[EntryRecord],
    calendar: CalendarReference = UTC_CALENDAR,
) -> list[HourCount]:
    counts = Counter(calendar.local(entry.created_at).hour for entry in entries)
    return [HourCount(hour=hour, count=counts.get(hour, 0)) for hour in range(24)]


def peak_hours(hours: Sequence[HourCount], top: int = policy.PEAK_HOURS) -> list[HourCount]:
    ranked = sorted(hours, key=lambda item: (-item.count, item.hour))
    return [item for item in ranked[:top] if item.count > 0]


def mood_distribution(entries: Iterable[EntryRecord]) -> MoodDistribution:
    moods = rated_moods(entries)
    if not moods:
        return MoodDistribution(
            buckets=[MoodBucket(rating=rating, count=0, percentage=0.0) for rating in range(1, 6)],
        )
    counts = Counter(moods)
    buckets = [
        MoodBucket(
            rating=rating,
            count=counts.get(rating, 0),
            percentage=counts.get(rating, 0) / len(moods) * 100,
        )
        for rating in range(1, 6)
    ]
    dominant = max(range(1, 6), key=lambda rating: counts.get(rating, 0))
    return MoodDistribution(buckets=buckets, dominant_rating=dominant, rated_entries=len(moods))


def heatmap_intensity(entry_count: int) -> int:
    if entry_count <= 0:
        return 0
    if entry_count <= 2:
        return 1
    if entry_count <= 4:
        return 2
    return 3


def calendar_heatmap(
    entries: Iterable[EntryRecord],
    date_range: DateRange,
    calendar: CalendarReference = UTC_CALENDAR,
) -> list[HeatmapCell]:
    grouped = group_by_day(entries, calendar)
    cells = []
    for key in date_range.date_keys():
        items = grouped.get(key, [])
        cells.append(
            HeatmapCell(
                date_key=key,
                entry_count=len(items),
                total_words=total_words(items),
                intensity=heatmap_intensity(len(items)),
            )
        )
    return cells


def month_summary(
    entries: Iterable[EntryRecord],
    reference_now: datetime,
    calendar: CalendarReference = UTC_CALENDAR,
) -> MonthSummary:
    current_key = month_key_of(calendar.local_date(reference_now))
    grouped = group_by_month(entries, calendar)
    current = grouped.get(current_key, [])
    previous = grouped.get(previous_month_key(current_key), [])
    return MonthSummary(
        month_key=current_key,
        entry_count=len(current),
        average_mood=average_mood(current),
        longest_streak=compute_longest_streak(active_date_keys(current, calendar)),
        comparison_to_previous=month_over_month(len(current), len(previous)),
    )


def achievements(total_entries: int, words: int, streak: StreakState) -> list[Achievement]:
    best_streak = max(streak.current_streak, streak.longest_streak)
    earned = [
        Achievement(
            id=f"entries-{requirement}",
            kind="entries",
            requirement=requirement,
            progress=total_entries,
            unlocked=total_entries >= requirement,
        )
        for requirement in policy.ENTRY_MILESTONES
    ]
    earned.extend(
        Achievement(
            id=f"streak-{requirement}",
            kind="streak",
            requirement=requirement,
            progress=best_streak,
            unlocked=streak.longest_streak >= requirement,
        )
        for requirement in policy.STREAK_MILESTONES
    )
    earned.extend(
        Achievement(
            id=f"words-{requirement // 1000}k",
            kind="words",
            requirement=requirement,
            progress=words,
            unlocked=words >= requirement,
        )
        for requirement in policy.WORD_MILESTONES
    )
    return earned


def growth_metrics(entries: Sequence[EntryRecord]) -> GrowthMetrics:
    depth = min(1.0, len(entries) / policy.REFLECTION_DEPTH_ENTRIES)
    rated = sorted(
        (entry for entry in entries if entry.mood_rating is not None),
        key=lambda entry: entry.created_at,
    )
    if len(rated) < 2:
        return GrowthMetrics(reflection_depth=depth)
    half = len(rated) // 2
    delta = average_mood(rated[half:]) - average_mood(rated[:half])
    direction: Literal["increasing", "decreasing", "stable"] = "stable"
    if delta > policy.MOOD_DIFFERENCE_THRESHOLD:
        direction = "increasing"
    elif delta < -policy.MOOD_DIFFERENCE_THRESHOLD:
        direction = "decreasing"
    return GrowthMetrics(reflection_depth=depth, mood_direction=direction)


__all__ = [
    "achievements",
    "average_mood",
    "calendar_heatmap",
    "consistency_score",
    "content_summary",
    "dominant_time_of_day",
    "growth_metrics",
    "heatmap_intensity",
    "hourly_distribution",
    "month_over_month",
    "month_summary",
    "mood_distribution",
    "mood_trends",
    "peak_hours",
    "period_trends",
    "rated_moods",
    "streak_analysis",
    "time_of_day_stats",
    "total_words",
    "weekday_patterns",
    "word_cloud",
]
