from __future__ import annotations

from datetime import date

from dentrak.attendance.model import AttendanceDraft, AttendanceKey, AttendanceRecord
from dentrak.core.enums import AttendanceCellState, AttendanceType, BlockCellState
from dentrak.schedules.model import ScheduleBlock, ScheduleBlockDraft
from dentrak.staging.change_set import PendingChangeSet
from dentrak.staging.resolver import (
    effective_attendance_type,
    is_effectively_blocked,
    resolve_attendance_state,
    resolve_block_state,
)

DAY = date(2024, 3, 1)
KEY = AttendanceKey(DAY, 7)


def test_empty_cell():
    assert resolve_attendance_state(KEY, {}, PendingChangeSet()) == AttendanceCellState.EMPTY


def test_staged_additions_by_type():
    pending = PendingChangeSet()
    pending.stage_addition(KEY, AttendanceDraft(date=DAY, practice_id=7))
    assert resolve_attendance_state(KEY, {}, pending) == AttendanceCellState.STAGED_FULL_DAY_ADDITION

    pending.stage_addition(KEY, AttendanceDraft(date=DAY, practice_id=7, attendance_type=AttendanceType.HALF_DAY))
    assert resolve_attendance_state(KEY, {}, pending) == AttendanceCellState.STAGED_HALF_DAY_ADDITION


def test_existing_record_uses_staged_update():
    record = AttendanceRecord(id=1, practice_id=7, date=DAY)
    records = {KEY: record}
    pending = PendingChangeSet()

    assert resolve_attendance_state(KEY, records, pending) == AttendanceCellState.EXISTING_FULL_DAY

    pending.stage_update(1, attendance_type=AttendanceType.HALF_DAY)
    assert effective_attendance_type(record, pending) == AttendanceType.HALF_DAY
    assert resolve_attendance_state(KEY, records, pending) == AttendanceCellState.EXISTING_HALF_DAY

    pending.stage_removal(1)
    assert resolve_attendance_state(KEY, records, pending) == AttendanceCellState.STAGED_REMOVAL_OF_EXISTING


def test_resolver_does_not_mutate_inputs():
    records = {KEY: AttendanceRecord(id=1, practice_id=7, date=DAY)}
    pending = PendingChangeSet()
    before = pending.copy()

    for _ in range(3):
        resolve_attendance_state(KEY, records, pending)
        resolve_attendance_state(AttendanceKey(DAY, 8), records, pending)

    assert pending == before


def test_block_states():
    blocks = [ScheduleBlock(id=1, start_date=date(2024, 1, 1), end_date=date(2024, 1, 5))]
    pending = PendingChangeSet()

    assert resolve_block_state(date(2024, 1, 3), blocks, pending) == BlockCellState.EFFECTIVELY_BLOCKED
    assert resolve_block_state(date(2024, 1, 6), blocks, pending) == BlockCellState.UNBLOCKED

    pending.stage_addition(date(2024, 1, 6), ScheduleBlockDraft.single_day(date(2024, 1, 6)))
    assert resolve_block_state(date(2024, 1, 6), blocks, pending) == BlockCellState.STAGED_BLOCK_ADDITION

    pending.stage_removal(1)
    assert resolve_block_state(date(2024, 1, 3), blocks, pending) == BlockCellState.STAGED_BLOCK_REMOVAL


def test_day_stays_blocked_while_any_overlapping_block_remains():
    blocks = [
        ScheduleBlock(id=1, start_date=date(2024, 1, 1), end_date=date(2024, 1, 5)),
        ScheduleBlock(id=2, start_date=date(2024, 1, 3), end_date=date(2024, 1, 10)),
    ]
    pending = PendingChangeSet()
    pending.stage_removal(1)

    assert resolve_block_state(date(2024, 1, 4), blocks, pending) == BlockCellState.EFFECTIVELY_BLOCKED
    assert resolve_block_state(date(2024, 1, 2), blocks, pending) == BlockCellState.STAGED_BLOCK_REMOVAL


def test_is_effectively_blocked_counts_pending_blocks():
    pending = PendingChangeSet()
    assert not is_effectively_blocked(DAY, [], pending)

    pending.stage_addition(DAY, ScheduleBlockDraft.single_day(DAY))
    assert is_effectively_blocked(DAY, [], pending)
