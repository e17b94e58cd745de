"""Tunable sensitivity of the insight feature.

These are product values carried over unchanged from the journaling app;
nothing statistical backs them, so change them only as a product decision.
"""

from __future__ import annotations

FAVORITE_DAY_RATIO = 1.5
TIME_PREFERENCE_RATIO = 1.5
MOOD_DIFFERENCE_THRESHOLD = 0.5
POSITIVE_MOOD_THRESHOLD = 4.0
MIN_RATED_ENTRIES = 5
VERBOSE_WORDS_PER_ENTRY = 300
STREAK_INSIGHT_DAYS = 7
MIN_TOP_WORD_MENTIONS = 5
MAX_INSIGHTS = 5

WORDS_PER_MINUTE = 200
REFLECTION_DEPTH_ENTRIES = 30
PEAK_HOURS = 3

ENTRY_MILESTONES = (1, 10, 50, 100, 250, 500, 1000)
STREAK_MILESTONES = (3, 7, 14, 30, 60, 100, 365)
WORD_MILESTONES = (10_000, 50_000, 100_000, 250_000, 500_000)
