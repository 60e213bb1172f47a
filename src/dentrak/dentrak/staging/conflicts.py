from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Iterable, Mapping, Optional, Sequence

from ..attendance.model import AttendanceRecord
from ..core.constants import CONFLICT_PREVIEW_LIMIT, UNKNOWN_PRACTICE_NAME
from ..practices.model import Practice
from .resolver import AttendanceChanges


@dataclass(frozen=True)
class BlockConflict:
    """Attendance that would sit inside a newly blocked day."""

    date: date
    practice_id: int
    practice_name: str
    record_id: Optional[int] = None
    is_pending_addition: bool = False


def find_conflicts(
    days: Iterable[date],
    attendance_records: Iterable[AttendanceRecord],
    attendance_pending: AttendanceChanges,
    practices: Mapping[int, Practice],
    *,
    include_staged_additions: bool = False,
) -> list[BlockConflict]:
    """Attendance on any of `days` that blocking them would invalidate.

    Persisted records already staged for removal are not conflicts. Staged
    additions are reported only when asked for.
    """
    wanted = set(days)
    if not wanted:
        return []

    def name_of(practice_id: int) -> str:
        practice = practices.get(practice_id)
        return practice.name if practice else UNKNOWN_PRACTICE_NAME

    conflicts = [
        BlockConflict(
            date=record.date,
            practice_id=record.practice_id,
            practice_name=name_of(record.practice_id),
            record_id=record.id,
        )
        for record in attendance_records
        if record.date in wanted and not attendance_pending.is_removed(record.id)
    ]

    if include_staged_additions:
        conflicts.extend(
            BlockConflict(
                date=key.date,
                practice_id=key.practice_id,
                practice_name=name_of(key.practice_id),
                is_pending_addition=True,
            )
            for key in attendance_pending.additions
            if key.date in wanted
        )

    conflicts.sort(key=lambda c: (c.date, c.practice_id, c.is_pending_addition))
    return conflicts


def format_conflict_summary(conflicts: Sequence[BlockConflict], *, limit: int = CONFLICT_PREVIEW_LIMIT) -> str:
    """Human-readable list for a confirmation prompt, e.g. "Jun 10, 2024 (Main St)"."""
    if not conflicts:
        return ""

    lines = [f"{c.date.strftime('%b')} {c.date.day}, {c.date.year} ({c.practice_name})" for c in conflicts[:limit]]
    if len(conflicts) > limit:
        lines.append(f"...and {len(conflicts) - limit} more")
    return "\n".join(lines)
