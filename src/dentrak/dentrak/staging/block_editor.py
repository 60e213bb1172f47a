from __future__ import annotations

import logging
from datetime import date

from ..common.datetime_utils import DateLike, to_calendar_day
from ..core.constants import BULK_BLOCK_REASON, DEFAULT_BLOCK_REASON
from ..core.enums import BlockBulkAction, BlockCellState, RecordKind
from ..schedules.model import ScheduleBlock, ScheduleBlockDraft
from .criteria import BlockBulkCriteria
from .editor import StagingEditor
from .resolver import covering_blocks, is_effectively_blocked, resolve_block_state

logger = logging.getLogger(__name__)


class BlockEditor(StagingEditor[date, ScheduleBlockDraft, ScheduleBlock]):
    """Staging editor for availability blocks, one cell per day."""

    kind = RecordKind.SCHEDULE_BLOCKS

    def covering(self, day: DateLike) -> list[ScheduleBlock]:
        return covering_blocks(to_calendar_day(day), self._records)

    def effective_state(self, day: DateLike) -> BlockCellState:
        return resolve_block_state(to_calendar_day(day), self._records, self._pending)

    def is_effectively_blocked(self, day: DateLike) -> bool:
        return is_effectively_blocked(to_calendar_day(day), self._records, self._pending)

    def toggle_cell(self, day: DateLike) -> BlockCellState:
        """Flip a day between its persisted state and the opposite one."""
        self._ensure_idle()
        day = to_calendar_day(day)
        pending = self._pending
        covering = covering_blocks(day, self._records)
        active = [b for b in covering if not pending.is_removed(b.id)]

        if active:
            for block in active:
                pending.stage_removal(block.id)
            pending.unstage_addition(day)
        elif pending.addition(day) is not None:
            pending.unstage_addition(day)
        elif covering:
            pending.unstage_removals(b.id for b in covering)
        else:
            pending.stage_addition(day, ScheduleBlockDraft.single_day(day, DEFAULT_BLOCK_REASON))

        return resolve_block_state(day, self._records, pending)

    def apply_bulk(self, criteria: BlockBulkCriteria) -> int:
        criteria.validate()
        self._ensure_idle()

        applied = 0
        for day in criteria.days():
            if criteria.action == BlockBulkAction.BLOCK:
                self._block(day)
            else:
                self._unblock(day)
            applied += 1

        logger.debug(
            "Bulk %s: %d days between %s and %s",
            criteria.action.value,
            applied,
            criteria.start_date.isoformat(),
            criteria.end_date.isoformat(),
        )
        return applied

    def _block(self, day: date) -> None:
        pending = self._pending
        covering = covering_blocks(day, self._records)
        pending.unstage_removals(b.id for b in covering)

        if not covering and pending.addition(day) is None:
            pending.stage_addition(day, ScheduleBlockDraft.single_day(day, BULK_BLOCK_REASON))

    def _unblock(self, day: date) -> None:
        pending = self._pending
        pending.unstage_addition(day)
        for block in covering_blocks(day, self._records):
            pending.stage_removal(block.id)

    def _is_persisted(self, day: date) -> bool:
        return bool(covering_blocks(day, self._records))
