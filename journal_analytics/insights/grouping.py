from __future__ import annotations

import re
from collections import defaultdict
from collections.abc import Callable, Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from datetime import UTC, date, datetime, timedelta
from zoneinfo import ZoneInfo

from ..core.config import Settings
from ..core.errors import InvalidDateKeyError, InvalidRangeError
from ..schemas.analytics import TimeOfDay
from ..schemas.entry import EntryRecord

_DATE_KEY_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")

WEEKDAY_NAMES = (
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
    "Sunday",
)

# Declaration order doubles as the tie-break order for dominant buckets.
TIME_OF_DAY_ORDER = (
    TimeOfDay.MORNING,
    TimeOfDay.AFTERNOON,
    TimeOfDay.EVENING,
    TimeOfDay.NIGHT,
)


@dataclass(frozen=True)
class CalendarReference:
    """The single calendar every grouping in one computation goes through."""

    tz: ZoneInfo = field(default_factory=lambda: ZoneInfo("UTC"))
    week_start: str = "sunday"

    @classmethod
    def from_settings(cls, settings: Settings) -> CalendarReference:
        return cls(tz=ZoneInfo(settings.reference_timezone), week_start=settings.week_start)

    def local(self, instant: datetime) -> datetime:
        if instant.tzinfo is None:
            instant = instant.replace(tzinfo=UTC)
        return instant.astimezone(self.tz)

    def local_date(self, instant: datetime) -> date:
        return self.local(instant).date()

    def week_start_of(self, day: date) -> date:
        if self.week_start == "monday":
            offset = day.weekday()
        else:
            offset = (day.weekday() + 1) % 7
        return day - timedelta(days=offset)


UTC_CALENDAR = CalendarReference()


@dataclass(frozen=True)
class DayGroup:
    date_key: str
    entries: tuple[EntryRecord, ...]


@dataclass(frozen=True)
class DateRange:
    """Inclusive range of calendar days."""

    start: date
    end: date

    def __post_init__(self) -> None:
        if self.start > self.end:
            raise InvalidRangeError(
                f"range start {self.start.isoformat()} is after end {self.end.isoformat()}"
            )

    @classmethod
    def trailing(cls, today: date, days: int) -> DateRange:
        return cls(start=today - timedelta(days=max(days, 1) - 1), end=today)

    @property
    def days(self) -> int:
        return (self.end - self.start).days + 1

    def contains(self, date_key: str) -> bool:
        return self.start <= parse_date_key(date_key) <= self.end

    def date_keys(self) -> list[str]:
        return [
            (self.start + timedelta(days=offset)).isoformat()
            for offset in range(self.days)
        ]


def date_key_of(day: date) -> str:
    return day.isoformat()


def to_date_key(instant: datetime, calendar: CalendarReference = UTC_CALENDAR) -> str:
    return date_key_of(calendar.local_date(instant))


def parse_date_key(key: object) -> date:
    if not isinstance(key, str) or not _DATE_KEY_RE.match(key):
        raise InvalidDateKeyError(key)
    try:
        return date.fromisoformat(key)
    except ValueError as exc:
        raise InvalidDateKeyError(key) from exc


def shift_date_key(key: str, days: int) -> str:
    return date_key_of(parse_date_key(key) + timedelta(days=days))


def month_key_of(day: date) -> str:
    return f"{day.year:04d}-{day.month:02d}"


def previous_month_key(month_key: str) -> str:
    year, month = (int(part) for part in month_key.split("-"))
    if month == 1:
        return f"{year - 1:04d}-12"
    return f"{year:04d}-{month - 1:02d}"


def time_of_day(instant: datetime, calendar: CalendarReference = UTC_CALENDAR) -> TimeOfDay:
    hour = calendar.local(instant).hour
    if 5 <= hour < 12:
        return TimeOfDay.MORNING
    if 12 <= hour < 17:
        return TimeOfDay.AFTERNOON
    if 17 <= hour < 22:
        return TimeOfDay.EVENING
    return TimeOfDay.NIGHT


def _group(
    entries: Iterable[EntryRecord],
    key_fn: Callable[[EntryRecord], str],
) -> dict[str, list[EntryRecord]]:
    buckets: defaultdict[str, list[EntryRecord]] = defaultdict(list)
    for entry in entries:
        buckets[key_fn(entry)].append(entry)
    return {key: buckets[key] for key in sorted(buckets)}


def group_by_day(
    entries: Iterable[EntryRecord],
    calendar: CalendarReference = UTC_CALENDAR,
) -> dict[str, list[EntryRecord]]:
    return _group(entries, lambda entry: to_date_key(entry.created_at, calendar))


def group_by_week(
    entries: Iterable[EntryRecord],
    calendar: CalendarReference = UTC_CALENDAR,
) -> dict[str, list[EntryRecord]]:
    return _group(
        entries,
        lambda entry: date_key_of(calendar.week_start_of(calendar.local_date(entry.created_at))),
    )


def group_by_month(
    entries: Iterable[EntryRecord],
    calendar: CalendarReference = UTC_CALENDAR,
) -> dict[str, list[EntryRecord]]:
    return _group(entries, lambda entry: month_key_of(calendar.local_date(entry.created_at)))


def day_groups(
    entries: Iterable[EntryRecord],
    calendar: CalendarReference = UTC_CALENDAR,
) -> list[DayGroup]:
    return [
        DayGroup(date_key=key, entries=tuple(items))
        for key, items in group_by_day(entries, calendar).items()
    ]


def flatten_groups(
    groups: Mapping[str, Sequence[EntryRecord]] | Iterable[DayGroup],
) -> list[EntryRecord]:
    if isinstance(groups, Mapping):
        return [entry for items in groups.values() for entry in items]
    return [entry for group in groups for entry in group.entries]


def active_date_keys(
    entries: Iterable[EntryRecord],
    calendar: CalendarReference = UTC_CALENDAR,
) -> set[str]:
    return {to_date_key(entry.created_at, calendar) for entry in entries}


def filter_range(
    entries: Iterable[EntryRecord],
    date_range: DateRange,
    calendar: CalendarReference = UTC_CALENDAR,
) -> list[EntryRecord]:
    return [
        entry
        for entry in entries
        if date_range.start <= calendar.local_date(entry.created_at) <= date_range.end
    ]


__all__ = [
    "TIME_OF_DAY_ORDER",
    "UTC_CALENDAR",
    "WEEKDAY_NAMES",
    "CalendarReference",
    "DateRange",
    "DayGroup",
    "active_date_keys",
    "date_key_of",
    "day_groups",
    "filter_range",
    "flatten_groups",
    "group_by_day",
    "group_by_month",
    "group_by_week",
    "month_key_of",
    "parse_date_key",
    "previous_month_key",
    "shift_date_key",
    "time_of_day",
    "to_date_key",
]
