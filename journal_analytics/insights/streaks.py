from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import date, datetime, timedelta
from functools import reduce
from itertools import accumulate, pairwise

from ..metrics import STREAK_CACHE_DRIFT
from ..schemas.analytics import StreakState
from ..schemas.entry import EntryRecord
from .grouping import (
    UTC_CALENDAR,
    CalendarReference,
    active_date_keys,
    date_key_of,
    parse_date_key,
    to_date_key,
)

logger = logging.getLogger(__name__)

_ONE_DAY = timedelta(days=1)

# (count, cursor, stopped)
_Walk = tuple[int, date, bool]


def _as_day(value: str | date) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return parse_date_key(value)


def _longest_run(ascending: tuple[date, ...]) -> int:
    if not ascending:
        return 0
    runs = accumulate(
        pairwise(ascending),
        lambda run, pair: run + 1 if pair[1] - pair[0] == _ONE_DAY else 1,
        initial=1,
    )
    return max(runs)


def _step(walk: _Walk, day: date) -> _Walk:
    count, cursor, stopped = walk
    if stopped:
        return walk
    if day == cursor:
        return count + 1, cursor - _ONE_DAY, False
    if day < cursor:
        return count, cursor, True
    return walk


def compute_longest_streak(date_keys: Iterable[str | date]) -> int:
    """Longest run of consecutive days over the whole history."""

    return _longest_run(tuple(sorted({_as_day(key) for key in date_keys})))


def compute_streak(date_keys: Iterable[str | date], today: str | date) -> StreakState:
    """Current and longest consecutive-day streaks anchored at ``today``.

    The current streak is live only when the most recent active day is today
    or yesterday; an older last entry means the streak is broken, not paused.
    Days after ``today`` (clock skew) are ignored entirely, and malformed keys
    raise instead of reading as an empty history.
    """

    today_day = _as_day(today)
    parsed = {_as_day(key) for key in date_keys}
    descending = tuple(sorted((day for day in parsed if day <= today_day), reverse=True))
    if not descending:
        return StreakState()

    most_recent = descending[0]
    yesterday = today_day - _ONE_DAY
    if most_recent < yesterday:
        current = 0
    else:
        anchor = today_day if most_recent == today_day else yesterday
        current, _, _ = reduce(_step, descending, (0, anchor, False))

    longest = _longest_run(tuple(reversed(descending)))
    return StreakState(
        current_streak=current,
        longest_streak=max(longest, current),
        last_active_date_key=date_key_of(most_recent),
    )


def streak_from_entries(
    entries: Iterable[EntryRecord],
    reference_now: datetime,
    calendar: CalendarReference = UTC_CALENDAR,
) -> StreakState:
    return compute_streak(
        active_date_keys(entries, calendar),
        to_date_key(reference_now, calendar),
    )


def reconcile_cached_streak(
    cached: StreakState | int | None,
    entries: Iterable[EntryRecord],
    reference_now: datetime,
    calendar: CalendarReference = UTC_CALENDAR,
) -> StreakState:
    """Recompute the streak and report when a stored value has drifted.

    The fresh value always wins; callers should overwrite their cache with it.
    """

    fresh = streak_from_entries(entries, reference_now, calendar)
    if cached is None:
        return fresh
    cached_current = cached if isinstance(cached, int) else cached.current_streak
    drifted = cached_current != fresh.current_streak
    if isinstance(cached, StreakState):
        drifted = drifted or cached != fresh
    if drifted:
        STREAK_CACHE_DRIFT.inc()
        logger.warning(
            "cached streak diverged from recomputation",
            extra={
                "date_key": fresh.last_active_date_key,
                "extra_fields": {
                    "cached_streak": cached_current,
                    "fresh_streak": fresh.current_streak,
                },
            },
        )
    return fresh


__all__ = [
    "compute_longest_streak",
    "compute_streak",
    "reconcile_cached_streak",
    "streak_from_entries",
]
