"""Effective-state resolution for calendar cells.

Every function here is pure: the result depends only on the persisted records
and the pending change set passed in, so it can be called for each rendered
cell on every render.
"""

from __future__ import annotations

from datetime import date
from typing import Iterable, Mapping, Optional

from ..attendance.model import AttendanceDraft, AttendanceKey, AttendanceRecord
from ..core.enums import AttendanceCellState, AttendanceType, BlockCellState
from ..schedules.model import ScheduleBlock, ScheduleBlockDraft
from .change_set import PendingChangeSet

AttendanceChanges = PendingChangeSet[AttendanceKey, AttendanceDraft]
BlockChanges = PendingChangeSet[date, ScheduleBlockDraft]


def effective_attendance_type(record: AttendanceRecord, pending: AttendanceChanges) -> AttendanceType:
    """Attendance type of a persisted record with any staged update applied."""
    patched = pending.update_for(record.id).get("attendance_type")
    return AttendanceType(patched) if patched else record.attendance_type


def resolve_attendance_state(
    key: AttendanceKey,
    records_by_key: Mapping[AttendanceKey, AttendanceRecord],
    pending: AttendanceChanges,
) -> AttendanceCellState:
    record: Optional[AttendanceRecord] = records_by_key.get(key)

    if record is not None:
        if pending.is_removed(record.id):
            return AttendanceCellState.STAGED_REMOVAL_OF_EXISTING
        if effective_attendance_type(record, pending) == AttendanceType.HALF_DAY:
            return AttendanceCellState.EXISTING_HALF_DAY
        return AttendanceCellState.EXISTING_FULL_DAY

    draft = pending.addition(key)
    if draft is None:
        return AttendanceCellState.EMPTY
    if draft.attendance_type == AttendanceType.HALF_DAY:
        return AttendanceCellState.STAGED_HALF_DAY_ADDITION
    return AttendanceCellState.STAGED_FULL_DAY_ADDITION


def covering_blocks(day: date, blocks: Iterable[ScheduleBlock]) -> list[ScheduleBlock]:
    return [block for block in blocks if block.covers(day)]


def resolve_block_state(day: date, blocks: Iterable[ScheduleBlock], pending: BlockChanges) -> BlockCellState:
    covering = covering_blocks(day, blocks)

    if any(not pending.is_removed(block.id) for block in covering):
        return BlockCellState.EFFECTIVELY_BLOCKED
    if pending.addition(day) is not None:
        return BlockCellState.STAGED_BLOCK_ADDITION
    if covering:
        return BlockCellState.STAGED_BLOCK_REMOVAL
    return BlockCellState.UNBLOCKED


def is_effectively_blocked(day: date, blocks: Iterable[ScheduleBlock], pending: BlockChanges) -> bool:
    """True when the day is blocked now or will be once pending changes are saved."""
    return resolve_block_state(day, blocks, pending) in (
        BlockCellState.EFFECTIVELY_BLOCKED,
        BlockCellState.STAGED_BLOCK_ADDITION,
    )
