from __future__ import annotations

import dataclasses
import logging
from typing import Iterable, Optional

from ..attendance.model import AttendanceDraft, AttendanceKey, AttendanceRecord
from ..common.datetime_utils import DateLike, to_calendar_day
from ..core.enums import AttendanceBulkAction, AttendanceCellState, AttendanceType, RecordKind
from ..store.repository import RecordStore
from .criteria import AttendanceBulkCriteria
from .editor import StagingEditor
from .resolver import effective_attendance_type, resolve_attendance_state

logger = logging.getLogger(__name__)


class AttendanceEditor(StagingEditor[AttendanceKey, AttendanceDraft, AttendanceRecord]):
    """Staging editor for the attendance calendar, one cell per (date, practice)."""

    kind = RecordKind.ATTENDANCE

    def __init__(self, store: RecordStore, records: Iterable[AttendanceRecord] = ()):
        self._by_key: dict[AttendanceKey, AttendanceRecord] = {}
        self._by_id: dict[int, AttendanceRecord] = {}
        super().__init__(store, records)

    def _reindex(self) -> None:
        by_key: dict[AttendanceKey, AttendanceRecord] = {}
        for record in self._records:
            if record.key in by_key:
                logger.warning(
                    "Duplicate attendance for %s practice %s (ids %s, %s); keeping the first",
                    record.date.isoformat(),
                    record.practice_id,
                    by_key[record.key].id,
                    record.id,
                )
                continue
            by_key[record.key] = record
        self._by_key = by_key
        self._by_id = {r.id: r for r in self._records}

    # --- queries ---

    def record_for(self, day: DateLike, practice_id: int) -> Optional[AttendanceRecord]:
        return self._by_key.get(AttendanceKey(to_calendar_day(day), int(practice_id)))

    def record_by_id(self, record_id: int) -> Optional[AttendanceRecord]:
        return self._by_id.get(int(record_id))

    def effective_state(self, day: DateLike, practice_id: int) -> AttendanceCellState:
        key = AttendanceKey(to_calendar_day(day), int(practice_id))
        return resolve_attendance_state(key, self._by_key, self._pending)

    # --- single cell ---

    def toggle_cell(self, day: DateLike, practice_id: int) -> AttendanceCellState:
        """Advance one cell through its cycle and return the new state.

        Empty -> full day -> half day -> empty for new entries; an existing full
        day becomes half day, then is staged for removal. A staged removal stays
        put until revert.
        """
        self._ensure_idle()
        key = AttendanceKey(to_calendar_day(day), int(practice_id))
        pending = self._pending
        record = self._by_key.get(key)

        if record is None:
            draft = pending.addition(key)
            if draft is None:
                pending.stage_addition(key, AttendanceDraft(date=key.date, practice_id=key.practice_id))
            elif draft.attendance_type == AttendanceType.FULL_DAY:
                pending.stage_addition(key, dataclasses.replace(draft, attendance_type=AttendanceType.HALF_DAY))
            else:
                pending.unstage_addition(key)
        elif pending.is_removed(record.id):
            pass
        elif effective_attendance_type(record, pending) == AttendanceType.FULL_DAY:
            pending.stage_update(record.id, attendance_type=AttendanceType.HALF_DAY)
        else:
            pending.stage_removal(record.id)

        return resolve_attendance_state(key, self._by_key, pending)

    def stage_removal(self, record_id: int) -> bool:
        """Stage removal of a persisted record by id, e.g. to resolve a block conflict."""
        self._ensure_idle()
        record = self._by_id.get(int(record_id))
        if record is None:
            return False
        self._pending.unstage_addition(record.key)
        return self._pending.stage_removal(record.id)

    def unstage_addition(self, day: DateLike, practice_id: int) -> bool:
        self._ensure_idle()
        return self._pending.unstage_addition(AttendanceKey(to_calendar_day(day), int(practice_id)))

    # --- bulk ---

    def apply_bulk(self, criteria: AttendanceBulkCriteria) -> int:
        """Apply select/deselect to every qualifying day; returns the day count.

        Idempotent: applying the same criteria twice leaves the same change set.
        """
        criteria.validate()
        self._ensure_idle()

        applied = 0
        for day in criteria.days():
            key = AttendanceKey(day, int(criteria.practice_id))
            if criteria.action == AttendanceBulkAction.SELECT:
                self._select(key, criteria.attendance_type)
            else:
                self._deselect(key)
            applied += 1

        logger.debug(
            "Bulk %s for practice %s: %d days between %s and %s",
            criteria.action.value,
            criteria.practice_id,
            applied,
            criteria.start_date.isoformat(),
            criteria.end_date.isoformat(),
        )
        return applied

    def _select(self, key: AttendanceKey, attendance_type: Optional[AttendanceType]) -> None:
        pending = self._pending
        record = self._by_key.get(key)

        if record is not None:
            pending.unstage_removal(record.id)
            if attendance_type is None:
                return
            if attendance_type == record.attendance_type:
                pending.clear_update(record.id, "attendance_type")
            else:
                pending.stage_update(record.id, attendance_type=attendance_type)
            return

        draft = pending.addition(key)
        if draft is None:
            pending.stage_addition(
                key,
                AttendanceDraft(
                    date=key.date,
                    practice_id=key.practice_id,
                    attendance_type=attendance_type or AttendanceType.FULL_DAY,
                ),
            )
        elif attendance_type is not None and draft.attendance_type != attendance_type:
            pending.stage_addition(key, dataclasses.replace(draft, attendance_type=attendance_type))

    def _deselect(self, key: AttendanceKey) -> None:
        self._pending.unstage_addition(key)
        record = self._by_key.get(key)
        if record is not None:
            self._pending.stage_removal(record.id)

    # --- commit ---

    def _is_persisted(self, key: AttendanceKey) -> bool:
        return key in self._by_key

    def _draft_for_create(self, draft: AttendanceDraft) -> AttendanceDraft:
        if draft.attendance_type is None:
            return dataclasses.replace(draft, attendance_type=AttendanceType.FULL_DAY)
        return draft
