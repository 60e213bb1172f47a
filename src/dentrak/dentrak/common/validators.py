from __future__ import annotations

from datetime import date
from typing import Iterable, Optional

from ..core.exceptions import ValidationError
from .datetime_utils import to_calendar_day


def require_date_range(start: date, end: date) -> None:
    if start > end:
        raise ValidationError(f"Start date {start.isoformat()} is after end date {end.isoformat()}")


def require_weekdays(weekdays: Iterable[int]) -> frozenset[int]:
    values = frozenset(weekdays)
    if not values:
        raise ValidationError("Select at least one day of the week")
    invalid = sorted((v for v in values if not isinstance(v, int) or not 0 <= v <= 6), key=repr)
    if invalid:
        raise ValidationError(f"Invalid weekday index: {invalid}")
    return values


def require_practice_id(practice_id: Optional[int]) -> int:
    if practice_id is None or int(practice_id) <= 0:
        raise ValidationError("Practice is required")
    return int(practice_id)


def require_choice(enum_cls, value, field_name: str):
    try:
        return enum_cls(value)
    except ValueError:
        raise ValidationError(f"{field_name} is not valid: {value!r}")


def require_day(value, field_name: str) -> date:
    try:
        return to_calendar_day(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} is not a valid date: {value!r}")
