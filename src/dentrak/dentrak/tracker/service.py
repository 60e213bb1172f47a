from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from datetime import date
from typing import Iterable, Mapping, Optional, Sequence, Union

from ..common.datetime_utils import DateLike, iter_days, to_calendar_day
from ..core.enums import AttendanceBulkAction, AttendanceCellState, BlockBulkAction, BlockCellState, RecordKind
from ..core.exceptions import BlockedDayError, NoPendingConflictError, ValidationError
from ..practices.model import Practice
from ..schedules.model import ScheduleBlockDraft
from ..staging.attendance_editor import AttendanceEditor
from ..staging.block_editor import BlockEditor
from ..staging.change_set import PendingCounts
from ..staging.conflicts import BlockConflict, find_conflicts, format_conflict_summary
from ..staging.criteria import AttendanceBulkCriteria, BlockBulkCriteria
from ..store.repository import RecordStore

logger = logging.getLogger(__name__)

_INTENDS_TO_BLOCK = (BlockCellState.UNBLOCKED, BlockCellState.STAGED_BLOCK_REMOVAL)


@dataclass(frozen=True)
class BlockStagingResult:
    """Outcome of a block gesture.

    When `staged` is False and conflicts are present, the gesture is parked until
    `confirm_block_conflicts()` or `cancel_block_conflicts()` is called.
    """

    staged: bool
    conflicts: tuple[BlockConflict, ...] = ()

    @property
    def requires_resolution(self) -> bool:
        return not self.staged and bool(self.conflicts)

    def summary(self) -> str:
        return format_conflict_summary(self.conflicts)


@dataclass(frozen=True)
class _ParkedBlockAction:
    target: Union[date, BlockBulkCriteria]
    conflicts: tuple[BlockConflict, ...]


class TrackerService:
    """Editing session for the attendance tracker.

    Owns one attendance editor and one block editor over the same store, keeps
    attendance off blocked days and gates blocking on days that already carry
    attendance.
    """

    def __init__(
        self,
        store: RecordStore,
        *,
        attendance: Optional[AttendanceEditor] = None,
        blocks: Optional[BlockEditor] = None,
        practices: Iterable[Practice] = (),
    ):
        self._store = store
        self.attendance = attendance or AttendanceEditor(store)
        self.blocks = blocks or BlockEditor(store)
        self._practices: dict[int, Practice] = {p.id: p for p in practices}
        self._parked: Optional[_ParkedBlockAction] = None

    async def load(self) -> None:
        practices, _, _ = await asyncio.gather(
            self._store.list_all(RecordKind.PRACTICES),
            self.attendance.load(),
            self.blocks.load(),
        )
        self._practices = {p.id: p for p in practices}

    @property
    def practices(self) -> Mapping[int, Practice]:
        return dict(self._practices)

    # --- rendering ---

    def attendance_state(self, day: DateLike, practice_id: int) -> AttendanceCellState:
        return self.attendance.effective_state(day, practice_id)

    def block_state(self, day: DateLike) -> BlockCellState:
        return self.blocks.effective_state(day)

    def pending_counts(self) -> PendingCounts:
        return self.attendance.pending_counts() + self.blocks.pending_counts()

    @property
    def unsaved_changes(self) -> int:
        return self.pending_counts().total

    # --- attendance gestures ---

    def toggle_attendance(self, day: DateLike, practice_id: int) -> AttendanceCellState:
        self._ensure_no_parked_action()
        day = to_calendar_day(day)
        if (
            self.attendance.effective_state(day, practice_id) == AttendanceCellState.EMPTY
            and self.blocks.is_effectively_blocked(day)
        ):
            logger.info("Refused attendance on blocked day %s", day.isoformat())
            raise BlockedDayError([day])
        return self.attendance.toggle_cell(day, practice_id)

    def apply_bulk_attendance(self, criteria: AttendanceBulkCriteria) -> int:
        self._ensure_no_parked_action()
        criteria.validate()
        if criteria.action == AttendanceBulkAction.SELECT:
            blocked = [d for d in criteria.days() if self.blocks.is_effectively_blocked(d)]
            if blocked:
                logger.info("Refused bulk attendance: %d blocked days", len(blocked))
                raise BlockedDayError(blocked)
        return self.attendance.apply_bulk(criteria)

    # --- block gestures ---

    def detect_conflicts(self, candidate: ScheduleBlockDraft) -> list[BlockConflict]:
        """Persisted, non-removed attendance inside the candidate block's span."""
        return find_conflicts(
            iter_days(candidate.start_date, candidate.end_date),
            self.attendance.records,
            self.attendance.pending,
            self._practices,
        )

    def toggle_block(self, day: DateLike) -> BlockStagingResult:
        self._ensure_no_parked_action()
        day = to_calendar_day(day)
        if self.blocks.effective_state(day) in _INTENDS_TO_BLOCK:
            conflicts = self._conflicts_for([day])
            if conflicts:
                return self._park(day, conflicts)

        self.blocks.toggle_cell(day)
        return BlockStagingResult(staged=True)

    def apply_bulk_blocks(self, criteria: BlockBulkCriteria) -> BlockStagingResult:
        self._ensure_no_parked_action()
        criteria.validate()
        if criteria.action == BlockBulkAction.BLOCK:
            to_block = [d for d in criteria.days() if not self.blocks.is_effectively_blocked(d)]
            conflicts = self._conflicts_for(to_block)
            if conflicts:
                return self._park(criteria, conflicts)

        self.blocks.apply_bulk(criteria)
        return BlockStagingResult(staged=True)

    @property
    def parked_conflicts(self) -> Sequence[BlockConflict]:
        return self._parked.conflicts if self._parked else ()

    def confirm_block_conflicts(self) -> BlockStagingResult:
        """Remove the conflicting attendance, then apply the parked block gesture."""
        parked = self._take_parked()
        for conflict in parked.conflicts:
            if conflict.record_id is not None:
                self.attendance.stage_removal(conflict.record_id)
            else:
                self.attendance.unstage_addition(conflict.date, conflict.practice_id)

        if isinstance(parked.target, BlockBulkCriteria):
            self.blocks.apply_bulk(parked.target)
        else:
            self.blocks.toggle_cell(parked.target)

        logger.info("Blocked with %d conflicting attendance entries removed", len(parked.conflicts))
        return BlockStagingResult(staged=True, conflicts=parked.conflicts)

    def cancel_block_conflicts(self) -> BlockStagingResult:
        parked = self._take_parked()
        logger.info("Cancelled block staging with %d conflicts", len(parked.conflicts))
        return BlockStagingResult(staged=False)

    # --- save / revert ---

    async def save_all(self) -> PendingCounts:
        """Commit attendance first (it may carry conflict removals), then blocks."""
        written = await self.attendance.commit()
        return written + await self.blocks.commit()

    def revert_all(self) -> None:
        self.attendance.revert()
        self.blocks.revert()
        self._parked = None

    # --- helpers ---

    def _days_blocked_by(self, days: Iterable[date]) -> set[date]:
        """Days that become blocked, including whole spans of blocks being restored."""
        affected: set[date] = set()
        pending = self.blocks.pending
        for day in days:
            affected.add(day)
            for block in self.blocks.covering(day):
                if pending.is_removed(block.id):
                    affected.update(iter_days(block.start_date, block.end_date))
        return affected

    def _conflicts_for(self, days: Iterable[date]) -> list[BlockConflict]:
        return find_conflicts(
            self._days_blocked_by(days),
            self.attendance.records,
            self.attendance.pending,
            self._practices,
            include_staged_additions=True,
        )

    def _park(self, target: Union[date, BlockBulkCriteria], conflicts: list[BlockConflict]) -> BlockStagingResult:
        self._parked = _ParkedBlockAction(target=target, conflicts=tuple(conflicts))
        logger.info("Block staging needs confirmation: %d conflicts", len(conflicts))
        return BlockStagingResult(staged=False, conflicts=tuple(conflicts))

    def _take_parked(self) -> _ParkedBlockAction:
        if self._parked is None:
            raise NoPendingConflictError("No block action is waiting for conflict resolution")
        parked, self._parked = self._parked, None
        return parked

    def _ensure_no_parked_action(self) -> None:
        if self._parked is not None:
            raise ValidationError("Resolve the pending block conflicts first")
