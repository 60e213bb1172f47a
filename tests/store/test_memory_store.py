from __future__ import annotations

from datetime import date

import pytest

from dentrak.attendance.model import AttendanceDraft
from dentrak.core.enums import AttendanceType, RecordKind
from dentrak.core.exceptions import RecordNotFoundError, ValidationError
from dentrak.practices.model import PracticeDraft
from dentrak.schedules.model import ScheduleBlockDraft
from dentrak.store.memory_store import InMemoryRecordStore


@pytest.mark.asyncio
async def test_ids_are_assigned_per_kind():
    store = InMemoryRecordStore()

    assert await store.create(RecordKind.PRACTICES, PracticeDraft("Main St")) == 1
    assert await store.create(RecordKind.ATTENDANCE, AttendanceDraft(date=date(2024, 3, 1), practice_id=1)) == 1
    assert await store.create(RecordKind.ATTENDANCE, AttendanceDraft(date=date(2024, 3, 2), practice_id=1)) == 2

    records = await store.list_all(RecordKind.ATTENDANCE)
    assert [(r.id, r.date) for r in records] == [(1, date(2024, 3, 1)), (2, date(2024, 3, 2))]
    assert records[0].notes == "Work day (Bulk/Single Add)"


@pytest.mark.asyncio
async def test_update_applies_patch():
    store = InMemoryRecordStore()
    (record_id,) = store.seed(RecordKind.ATTENDANCE, [AttendanceDraft(date=date(2024, 3, 1), practice_id=1)])

    await store.update(RecordKind.ATTENDANCE, record_id, {"attendance_type": AttendanceType.HALF_DAY})

    record = store.get(RecordKind.ATTENDANCE, record_id)
    assert record.attendance_type == AttendanceType.HALF_DAY
    assert record.date == date(2024, 3, 1)


@pytest.mark.asyncio
async def test_update_rejects_unknown_fields_and_ids():
    store = InMemoryRecordStore()
    store.seed(RecordKind.SCHEDULE_BLOCKS, [ScheduleBlockDraft.single_day(date(2024, 1, 1))])

    with pytest.raises(ValidationError):
        await store.update(RecordKind.SCHEDULE_BLOCKS, 1, {"colour": "red"})
    with pytest.raises(ValidationError):
        await store.update(RecordKind.SCHEDULE_BLOCKS, 1, {"id": 5})
    with pytest.raises(RecordNotFoundError):
        await store.update(RecordKind.SCHEDULE_BLOCKS, 2, {"reason": "Holiday"})


@pytest.mark.asyncio
async def test_delete_missing_id_raises():
    store = InMemoryRecordStore()
    store.seed(RecordKind.PRACTICES, [PracticeDraft("Main St")])

    await store.delete_by_id(RecordKind.PRACTICES, 1)
    assert await store.list_all(RecordKind.PRACTICES) == []

    with pytest.raises(RecordNotFoundError) as excinfo:
        await store.delete_by_id(RecordKind.PRACTICES, 1)
    assert excinfo.value.record_id == 1
