from __future__ import annotations

from datetime import UTC, date, datetime, timedelta
from zoneinfo import ZoneInfo

import pytest

from journal_analytics.core.errors import InvalidDateKeyError
from journal_analytics.insights.grouping import CalendarReference, shift_date_key
from journal_analytics.insights.streaks import (
    compute_longest_streak,
    compute_streak,
    reconcile_cached_streak,
    streak_from_entries,
)
from journal_analytics.schemas.analytics import StreakState


def _keys(start: str, days: int) -> set[str]:
    return {shift_date_key(start, -offset) for offset in range(days)}


def test_no_entries() -> None:
    assert compute_streak(set(), "2024-06-10") == StreakState(
        current_streak=0, longest_streak=0, last_active_date_key=None
    )


def test_single_entry_today() -> None:
    state = compute_streak({"2024-06-10"}, "2024-06-10")
    assert state == StreakState(current_streak=1, longest_streak=1, last_active_date_key="2024-06-10")


def test_three_days_ending_today() -> None:
    state = compute_streak({"2024-06-10", "2024-06-09", "2024-06-08"}, "2024-06-10")
    assert state.current_streak == 3
    assert state.longest_streak == 3
    assert state.last_active_date_key == "2024-06-10"


def test_gap_before_today_breaks_current_run() -> None:
    state = compute_streak({"2024-01-01", "2024-01-02", "2024-01-03", "2024-01-05"}, "2024-01-05")
    assert state.current_streak == 1
    assert state.longest_streak == 3


def test_streak_anchored_at_yesterday_is_still_live() -> None:
    state = compute_streak({"2024-06-09", "2024-06-08"}, "2024-06-10")
    assert state.current_streak == 2
    assert state.last_active_date_key == "2024-06-09"


def test_missed_day_resets_current_regardless_of_history() -> None:
    history = _keys("2024-06-08", 40)
    state = compute_streak(history, "2024-06-10")
    assert state.current_streak == 0
    assert state.longest_streak == 40
    assert state.last_active_date_key == "2024-06-08"


def test_connected_run_only() -> None:
    state = compute_streak({"2024-06-10", "2024-06-09", "2024-06-05"}, "2024-06-10")
    assert state.current_streak == 2
    assert state.longest_streak == 2


def test_future_dated_keys_are_ignored() -> None:
    assert compute_streak({"2024-06-11", "2024-06-12"}, "2024-06-10") == StreakState()

    state = compute_streak({"2024-06-12", "2024-06-10", "2024-06-09"}, "2024-06-10")
    assert state.current_streak == 2
    assert state.longest_streak == 2
    assert state.last_active_date_key == "2024-06-10"


def test_malformed_key_fails_fast() -> None:
    with pytest.raises(InvalidDateKeyError):
        compute_streak({"2024-06-10", "yesterday"}, "2024-06-10")
    with pytest.raises(InvalidDateKeyError):
        compute_streak({"2024-06-10"}, "10/06/2024")


def test_accepts_date_objects() -> None:
    state = compute_streak({date(2024, 6, 10), date(2024, 6, 9)}, date(2024, 6, 10))
    assert state.current_streak == 2


@pytest.mark.parametrize("run", [1, 2, 7, 31, 400])
def test_current_streak_counts_back_to_first_missing_day(run: int) -> None:
    today = "2024-06-10"
    keys = _keys(today, run) | {shift_date_key(today, -(run + 3))}
    state = compute_streak(keys, today)
    assert state.current_streak == run
    assert state.longest_streak >= state.current_streak


def test_longest_streak_over_whole_history() -> None:
    keys = _keys("2023-03-05", 5) | _keys("2023-12-31", 9) | {"2024-02-01"}
    assert compute_longest_streak(keys) == 9
    assert compute_longest_streak(set()) == 0
    assert compute_longest_streak({"2024-01-01"}) == 1


def test_ten_entries_on_one_day_count_once(make_entry) -> None:
    entries = [make_entry(f"2024-06-10T{hour:02d}:00:00") for hour in range(8, 18)]
    state = streak_from_entries(entries, datetime(2024, 6, 10, 20, tzinfo=UTC))
    assert state.current_streak == 1
    assert state.longest_streak == 1


def test_second_entry_on_counted_day_changes_nothing(make_entry) -> None:
    now = datetime(2024, 6, 10, 21, tzinfo=UTC)
    entries = [make_entry(now - timedelta(days=offset)) for offset in range(4)]
    before = streak_from_entries(entries, now)
    after = streak_from_entries([*entries, make_entry("2024-06-08T07:00:00")], now)
    assert before == after


def test_naive_reference_now_ignores_host_timezone(make_entry, new_york_host) -> None:
    entries = [make_entry("2024-01-01T23:30:00"), make_entry("2023-12-31T12:00:00")]

    state = streak_from_entries(entries, datetime(2024, 1, 1, 23, 45))

    assert state == StreakState(
        current_streak=2, longest_streak=2, last_active_date_key="2024-01-01"
    )


def test_reference_calendar_decides_today(make_entry) -> None:
    entries = [make_entry("2024-06-10T02:00:00"), make_entry("2024-06-09T02:00:00")]
    now = datetime(2024, 6, 11, 1, 0, tzinfo=UTC)

    utc_state = streak_from_entries(entries, now)
    la_state = streak_from_entries(entries, now, CalendarReference(tz=ZoneInfo("America/Los_Angeles")))

    assert utc_state.current_streak == 2
    assert utc_state.last_active_date_key == "2024-06-10"
    # In Los Angeles both entries fall a day earlier and "now" is still June 10
    assert la_state.current_streak == 2
    assert la_state.last_active_date_key == "2024-06-09"


def test_reconcile_prefers_fresh_value(make_entry, caplog: pytest.LogCaptureFixture) -> None:
    now = datetime(2024, 6, 10, 12, tzinfo=UTC)
    entries = [make_entry("2024-06-10T08:00:00"), make_entry("2024-06-09T08:00:00")]

    with caplog.at_level("WARNING"):
        fresh = reconcile_cached_streak(5, entries, now)

    assert fresh.current_streak == 2
    assert "cached streak diverged" in caplog.text


def test_reconcile_is_quiet_when_cache_agrees(make_entry, caplog: pytest.LogCaptureFixture) -> None:
    now = datetime(2024, 6, 10, 12, tzinfo=UTC)
    entries = [make_entry("2024-06-10T08:00:00")]
    cached = StreakState(current_streak=1, longest_streak=1, last_active_date_key="2024-06-10")

    with caplog.at_level("WARNING"):
        fresh = reconcile_cached_streak(cached, entries, now)

    assert fresh == cached
    assert caplog.text == ""
