from __future__ import annotations

from datetime import date
from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from .insights import InsightSignal


class TimeOfDay(str, Enum):
    MORNING = "morning"
    AFTERNOON = "afternoon"
    EVENING = "evening"
    NIGHT = "night"


class StreakState(BaseModel):
    model_config = ConfigDict(frozen=True)

    current_streak: int = Field(default=0, ge=0)
    longest_streak: int = Field(default=0, ge=0)
    last_active_date_key: str | None = None


class StreakAnalysis(BaseModel):
    current_streak: int
    longest_streak: int
    last_active_date_key: str | None = None
    average_gap_between_entries: float
    consistency: float = Field(ge=0, le=1)


class MoodTrendPoint(BaseModel):
    date_key: str
    average_mood: float
    entry_count: int


class WordCloudItem(BaseModel):
    word: str
    frequency: int
    sentiment: Literal["positive", "neutral", "negative"] = "neutral"


class WeekdayPattern(BaseModel):
    weekday: int = Field(ge=0, le=6)
    day_name: str
    entry_count: int = Field(ge=0)
    average_word_count: float
    average_mood: float
    preferred_time: TimeOfDay | None = None


class ContentSummary(BaseModel):
    total_entries: int
    total_words: int
    average_words_per_entry: float
    most_productive_day: str | None = None
    reading_time_minutes: float


class TimeOfDayStat(BaseModel):
    bucket: TimeOfDay
    entry_count: int
    rated_count: int
    average_mood: float


class GrowthMetrics(BaseModel):
    reflection_depth: float = Field(ge=0, le=1)
    mood_direction: Literal["increasing", "decreasing", "stable"] = "stable"


class HourCount(BaseModel):
    hour: int = Field(ge=0, le=23)
    count: int = Field(ge=0)


class MoodBucket(BaseModel):
    rating: int = Field(ge=1, le=5)
    count: int
    percentage: float


class MoodDistribution(BaseModel):
    buckets: list[MoodBucket]
    dominant_rating: int | None = None
    rated_entries: int = 0


class HeatmapCell(BaseModel):
    date_key: str
    entry_count: int
    total_words: int
    intensity: int = Field(ge=0, le=3)


class PeriodTrend(BaseModel):
    period_key: str
    entry_count: int
    total_words: int
    average_words: float


class MonthSummary(BaseModel):
    month_key: str
    entry_count: int
    average_mood: float
    longest_streak: int
    comparison_to_previous: float


class Achievement(BaseModel):
    id: str
    kind: Literal["entries", "streak", "words"]
    requirement: int
    progress: int
    unlocked: bool


class AnalyticsSnapshot(BaseModel):
    """Everything the dashboard renders for one user over one range."""

    range_start: date
    range_end: date
    today: str
    streak: StreakState
    streak_analysis: StreakAnalysis
    mood_trends: list[MoodTrendPoint]
    average_mood: float
    rated_entries: int
    word_cloud: list[WordCloudItem]
    writing_patterns: list[WeekdayPattern]
    time_of_day: list[TimeOfDayStat]
    content: ContentSummary
    growth: GrowthMetrics
    hourly_distribution: list[HourCount]
    peak_hours: list[HourCount]
    mood_distribution: MoodDistribution
    heatmap: list[HeatmapCell]
    weekly_trends: list[PeriodTrend]
    monthly_trends: list[PeriodTrend]
    month_summary: MonthSummary
    achievements: list[Achievement]
    insights: list[InsightSignal] = Field(default_factory=list)


__all__ = [
    "Achievement",
    "AnalyticsSnapshot",
    "ContentSummary",
    "GrowthMetrics",
    "HeatmapCell",
    "HourCount",
    "MonthSummary",
    "MoodBucket",
    "MoodDistribution",
    "MoodTrendPoint",
    "PeriodTrend",
    "StreakAnalysis",
    "StreakState",
    "TimeOfDay",
    "TimeOfDayStat",
    "WeekdayPattern",
    "WordCloudItem",
]
