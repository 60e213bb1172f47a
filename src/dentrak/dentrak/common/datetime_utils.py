from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from typing import Iterator, Union

DateLike = Union[date, datetime, str]

_ONE_DAY = timedelta(days=1)


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def to_calendar_day(value: DateLike) -> date:
    """Normalise a date, datetime or ISO string to a plain calendar day.

    Aware datetimes, and ISO strings with an offset, are converted to UTC first;
    naive ones are taken as-is.
    """
    if isinstance(value, str):
        text = value.strip()
        if len(text) <= 10:
            return parse_iso_date(text)
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        value = datetime.fromisoformat(text)
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value.date()
    return value


def weekday_index(day: date) -> int:
    """Sunday=0 .. Saturday=6."""
    return (day.weekday() + 1) % 7


def iter_days(start: DateLike, end: DateLike) -> Iterator[date]:
    """Yield every calendar day in the inclusive interval [start, end]."""
    current = to_calendar_day(start)
    last = to_calendar_day(end)
    while current <= last:
        yield current
        current = current + _ONE_DAY


def iter_weekdays(start: DateLike, end: DateLike, weekdays) -> Iterator[date]:
    allowed = frozenset(weekdays)
    for day in iter_days(start, end):
        if weekday_index(day) in allowed:
            yield day
