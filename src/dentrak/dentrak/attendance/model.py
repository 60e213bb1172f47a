from __future__ import annotations

from dataclasses import dataclass
from datetime import date, time
from typing import Optional

from ..core.constants import DEFAULT_ATTENDANCE_NOTE
from ..core.enums import AttendanceType


@dataclass(frozen=True)
class AttendanceKey:
    """Calendar cell address for attendance: one practice on one day."""

    date: date
    practice_id: int


@dataclass(frozen=True)
class AttendanceRecord:
    """Persisted attendance entry. At most one per (date, practice_id)."""

    id: int
    practice_id: int
    date: date
    attendance_type: AttendanceType = AttendanceType.FULL_DAY
    check_in_time: Optional[time] = None
    check_out_time: Optional[time] = None
    notes: Optional[str] = None

    @property
    def key(self) -> AttendanceKey:
        return AttendanceKey(self.date, self.practice_id)


@dataclass(frozen=True)
class AttendanceDraft:
    """Staged attendance entry that has no store id yet."""

    date: date
    practice_id: int
    attendance_type: AttendanceType = AttendanceType.FULL_DAY
    check_in_time: Optional[time] = None
    check_out_time: Optional[time] = None
    notes: Optional[str] = DEFAULT_ATTENDANCE_NOTE

    @property
    def key(self) -> AttendanceKey:
        return AttendanceKey(self.date, self.practice_id)

    def to_record(self, record_id: int) -> AttendanceRecord:
        return AttendanceRecord(
            id=int(record_id),
            practice_id=self.practice_id,
            date=self.date,
            attendance_type=self.attendance_type or AttendanceType.FULL_DAY,
            check_in_time=self.check_in_time,
            check_out_time=self.check_out_time,
            notes=self.notes,
        )
