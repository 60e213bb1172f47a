from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from ..core.constants import DEFAULT_BLOCK_REASON


@dataclass(frozen=True)
class ScheduleBlock:
    """Persisted availability block: no attendance within [start_date, end_date]."""

    id: int
    start_date: date
    end_date: date
    reason: str = DEFAULT_BLOCK_REASON

    def covers(self, day: date) -> bool:
        return self.start_date <= day <= self.end_date


@dataclass(frozen=True)
class ScheduleBlockDraft:
    start_date: date
    end_date: date
    reason: str = DEFAULT_BLOCK_REASON

    @classmethod
    def single_day(cls, day: date, reason: str = DEFAULT_BLOCK_REASON) -> "ScheduleBlockDraft":
        return cls(start_date=day, end_date=day, reason=reason)

    def covers(self, day: date) -> bool:
        return self.start_date <= day <= self.end_date

    def to_record(self, record_id: int) -> ScheduleBlock:
        return ScheduleBlock(
            id=int(record_id),
            start_date=self.start_date,
            end_date=self.end_date,
            reason=self.reason or DEFAULT_BLOCK_REASON,
        )
