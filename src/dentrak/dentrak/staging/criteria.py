from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import FrozenSet, Iterator, Optional

from ..common.datetime_utils import DateLike, iter_weekdays
from ..common.validators import (
    require_choice,
    require_date_range,
    require_day,
    require_practice_id,
    require_weekdays,
)
from ..core.constants import WORK_WEEKDAYS
from ..core.enums import AttendanceBulkAction, AttendanceType, BlockBulkAction


@dataclass(frozen=True)
class AttendanceBulkCriteria:
    action: AttendanceBulkAction
    practice_id: int
    start_date: date
    end_date: date
    weekdays: FrozenSet[int] = WORK_WEEKDAYS
    attendance_type: Optional[AttendanceType] = None

    @classmethod
    def build(
        cls,
        *,
        action: AttendanceBulkAction | str,
        practice_id: int,
        start_date: DateLike,
        end_date: DateLike,
        weekdays=WORK_WEEKDAYS,
        attendance_type: AttendanceType | str | None = None,
    ) -> "AttendanceBulkCriteria":
        """Normalise raw UI input and validate it."""
        criteria = cls(
            action=require_choice(AttendanceBulkAction, action, "Action"),
            practice_id=require_practice_id(practice_id),
            start_date=require_day(start_date, "Start date"),
            end_date=require_day(end_date, "End date"),
            weekdays=require_weekdays(weekdays),
            attendance_type=require_choice(AttendanceType, attendance_type, "Attendance type") if attendance_type else None,
        )
        criteria.validate()
        return criteria

    def validate(self) -> None:
        require_practice_id(self.practice_id)
        require_date_range(self.start_date, self.end_date)
        require_weekdays(self.weekdays)

    def days(self) -> Iterator[date]:
        return iter_weekdays(self.start_date, self.end_date, self.weekdays)


@dataclass(frozen=True)
class BlockBulkCriteria:
    action: BlockBulkAction
    start_date: date
    end_date: date
    weekdays: FrozenSet[int] = WORK_WEEKDAYS

    @classmethod
    def build(
        cls,
        *,
        action: BlockBulkAction | str,
        start_date: DateLike,
        end_date: DateLike,
        weekdays=WORK_WEEKDAYS,
    ) -> "BlockBulkCriteria":
        criteria = cls(
            action=require_choice(BlockBulkAction, action, "Action"),
            start_date=require_day(start_date, "Start date"),
            end_date=require_day(end_date, "End date"),
            weekdays=require_weekdays(weekdays),
        )
        criteria.validate()
        return criteria

    def validate(self) -> None:
        require_date_range(self.start_date, self.end_date)
        require_weekdays(self.weekdays)

    def days(self) -> Iterator[date]:
        return iter_weekdays(self.start_date, self.end_date, self.weekdays)
