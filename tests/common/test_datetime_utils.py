from __future__ import annotations

from datetime import date, datetime, timedelta, timezone

import pytest

from dentrak.common.datetime_utils import iter_days, iter_weekdays, to_calendar_day, weekday_index
from dentrak.common.validators import require_choice, require_weekdays
from dentrak.core.enums import AttendanceType
from dentrak.core.exceptions import ValidationError


def test_weekday_index_starts_on_sunday():
    # 2024-06-09 is a Sunday
    assert weekday_index(date(2024, 6, 9)) == 0
    assert weekday_index(date(2024, 6, 10)) == 1
    assert weekday_index(date(2024, 6, 15)) == 6


def test_iter_days_is_inclusive():
    assert list(iter_days("2024-02-28", "2024-03-01")) == [date(2024, 2, 28), date(2024, 2, 29), date(2024, 3, 1)]
    assert list(iter_days("2024-03-01", "2024-03-01")) == [date(2024, 3, 1)]
    assert list(iter_days("2024-03-02", "2024-03-01")) == []


def test_iter_days_counts_each_day_once_across_dst_changes():
    spring = list(iter_days("2024-03-09", "2024-03-11"))
    autumn = list(iter_days("2024-11-02", "2024-11-04"))

    assert len(spring) == len(set(spring)) == 3
    assert len(autumn) == len(set(autumn)) == 3


def test_iter_weekdays_filters():
    days = list(iter_weekdays("2024-06-09", "2024-06-15", {0, 6}))
    assert days == [date(2024, 6, 9), date(2024, 6, 15)]


def test_to_calendar_day_normalises_inputs():
    assert to_calendar_day("2024-03-10") == date(2024, 3, 10)
    assert to_calendar_day("2024-03-10T23:30:00") == date(2024, 3, 10)
    assert to_calendar_day(datetime(2024, 3, 10, 23, 30)) == date(2024, 3, 10)

    late_evening_west = datetime(2024, 3, 10, 22, 0, tzinfo=timezone(timedelta(hours=-5)))
    assert to_calendar_day(late_evening_west) == date(2024, 3, 11)


def test_to_calendar_day_rejects_garbage():
    with pytest.raises(ValueError):
        to_calendar_day("10/03/2024")


def test_require_weekdays():
    assert require_weekdays([1, 1, 2]) == frozenset({1, 2})
    with pytest.raises(ValidationError):
        require_weekdays([])
    with pytest.raises(ValidationError):
        require_weekdays([-1, 3])
    with pytest.raises(ValidationError):
        require_weekdays(["mon"])


def test_require_choice():
    assert require_choice(AttendanceType, "HALF_DAY", "Attendance type") is AttendanceType.HALF_DAY
    with pytest.raises(ValidationError):
        require_choice(AttendanceType, "QUARTER_DAY", "Attendance type")


def test_iso_strings_with_offset_match_aware_datetimes():
    moment = datetime(2024, 3, 1, 23, 30, tzinfo=timezone(timedelta(hours=-5)))

    assert to_calendar_day("2024-03-01T23:30:00-05:00") == to_calendar_day(moment) == date(2024, 3, 2)
    assert to_calendar_day(moment.isoformat()) == date(2024, 3, 2)
    assert to_calendar_day("2024-03-01T23:30:00Z") == date(2024, 3, 1)
    assert to_calendar_day("2024-03-02T01:00:00+09:00") == date(2024, 3, 1)


def test_offset_strings_give_the_same_bulk_days():
    days = list(iter_days("2024-03-01T23:30:00-05:00", "2024-03-03T20:00:00-05:00"))
    assert days == [date(2024, 3, 2), date(2024, 3, 3), date(2024, 3, 4)]
