"""Example: stage attendance and blocks, resolve a conflict, then save.

Runs against the in-memory store, no database needed.
"""

import asyncio
from datetime import date

from dentrak.attendance.model import AttendanceDraft
from dentrak.core.enums import RecordKind
from dentrak.practices.model import PracticeDraft
from dentrak.staging.criteria import AttendanceBulkCriteria
from dentrak.store.memory_store import InMemoryRecordStore
from dentrak.tracker.service import TrackerService


async def main():
    store = InMemoryRecordStore()
    store.seed(RecordKind.PRACTICES, [PracticeDraft("City Center Dentistry")])
    store.seed(RecordKind.ATTENDANCE, [AttendanceDraft(date=date(2024, 6, 11), practice_id=1)])

    tracker = TrackerService(store)
    await tracker.load()

    tracker.apply_bulk_attendance(
        AttendanceBulkCriteria.build(action="select", practice_id=1, start_date="2024-06-03", end_date="2024-06-07")
    )
    print("unsaved changes:", tracker.unsaved_changes)

    result = tracker.toggle_block("2024-06-11")
    if result.requires_resolution:
        print("conflicts:\n" + result.summary())
        tracker.confirm_block_conflicts()

    written = await tracker.save_all()
    print("saved:", written.total, "unsaved now:", tracker.unsaved_changes)


if __name__ == "__main__":
    asyncio.run(main())
