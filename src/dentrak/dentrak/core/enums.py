from __future__ import annotations

from enum import Enum


class AttendanceType(str, Enum):
    """Length of a recorded work day."""

    FULL_DAY = "FULL_DAY"
    HALF_DAY = "HALF_DAY"


class RecordKind(str, Enum):
    """Collections exposed by the record store."""

    ATTENDANCE = "attendance"
    SCHEDULE_BLOCKS = "schedule_blocks"
    PRACTICES = "practices"


class AttendanceCellState(str, Enum):
    """Displayed state of one (date, practice) cell."""

    EMPTY = "EMPTY"
    STAGED_FULL_DAY_ADDITION = "STAGED_FULL_DAY_ADDITION"
    STAGED_HALF_DAY_ADDITION = "STAGED_HALF_DAY_ADDITION"
    EXISTING_FULL_DAY = "EXISTING_FULL_DAY"
    EXISTING_HALF_DAY = "EXISTING_HALF_DAY"
    STAGED_REMOVAL_OF_EXISTING = "STAGED_REMOVAL_OF_EXISTING"


class BlockCellState(str, Enum):
    """Displayed state of one day in the availability calendar."""

    UNBLOCKED = "UNBLOCKED"
    STAGED_BLOCK_ADDITION = "STAGED_BLOCK_ADDITION"
    EFFECTIVELY_BLOCKED = "EFFECTIVELY_BLOCKED"
    STAGED_BLOCK_REMOVAL = "STAGED_BLOCK_REMOVAL"


class AttendanceBulkAction(str, Enum):
    SELECT = "select"
    DESELECT = "deselect"


class BlockBulkAction(str, Enum):
    BLOCK = "block"
    UNBLOCK = "unblock"
