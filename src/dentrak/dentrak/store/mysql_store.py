from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable, Dict, Mapping, Sequence

from ..attendance.model import AttendanceDraft, AttendanceRecord
from ..core.enums import AttendanceType, RecordKind
from ..core.exceptions import RecordNotFoundError, ValidationError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, time_column
from ..practices.model import Practice, PracticeDraft
from ..schedules.model import ScheduleBlock, ScheduleBlockDraft

logger = logging.getLogger(__name__)


def _attendance_from_row(r: Dict[str, Any]) -> AttendanceRecord:
    return AttendanceRecord(
        id=int(r["id"]),
        practice_id=int(r["practice_id"]),
        date=r["work_date"],
        attendance_type=AttendanceType(r.get("attendance_type") or AttendanceType.FULL_DAY.value),
        check_in_time=time_column(r.get("check_in_time")),
        check_out_time=time_column(r.get("check_out_time")),
        notes=r.get("notes"),
    )


def _block_from_row(r: Dict[str, Any]) -> ScheduleBlock:
    return ScheduleBlock(
        id=int(r["id"]),
        start_date=r["start_date"],
        end_date=r["end_date"],
        reason=r.get("reason") or "",
    )


def _practice_from_row(r: Dict[str, Any]) -> Practice:
    return Practice(id=int(r["id"]), name=r["name"])


_TABLES: Dict[RecordKind, str] = {
    RecordKind.ATTENDANCE: "attendance_records",
    RecordKind.SCHEDULE_BLOCKS: "schedule_blocks",
    RecordKind.PRACTICES: "practices",
}

_SELECTS: Dict[RecordKind, str] = {
    RecordKind.ATTENDANCE: (
        "SELECT id, practice_id, work_date, attendance_type, check_in_time, check_out_time, notes "
        "FROM attendance_records ORDER BY id ASC"
    ),
    RecordKind.SCHEDULE_BLOCKS: "SELECT id, start_date, end_date, reason FROM schedule_blocks ORDER BY id ASC",
    RecordKind.PRACTICES: "SELECT id, name FROM practices ORDER BY id ASC",
}

_ROW_MAPPERS: Dict[RecordKind, Callable[[Dict[str, Any]], Any]] = {
    RecordKind.ATTENDANCE: _attendance_from_row,
    RecordKind.SCHEDULE_BLOCKS: _block_from_row,
    RecordKind.PRACTICES: _practice_from_row,
}

# record field -> column
_PATCHABLE: Dict[RecordKind, Dict[str, str]] = {
    RecordKind.ATTENDANCE: {
        "practice_id": "practice_id",
        "date": "work_date",
        "attendance_type": "attendance_type",
        "check_in_time": "check_in_time",
        "check_out_time": "check_out_time",
        "notes": "notes",
    },
    RecordKind.SCHEDULE_BLOCKS: {"start_date": "start_date", "end_date": "end_date", "reason": "reason"},
    RecordKind.PRACTICES: {"name": "name"},
}


def _column_value(value: Any) -> Any:
    return value.value if isinstance(value, AttendanceType) else value


class MySQLRecordStore:
    """RecordStore backed by MySQL.

    mysql-connector is blocking, so every call runs in a worker thread with its
    own short-lived connection.
    """

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    async def list_all(self, kind: RecordKind) -> Sequence[Any]:
        return await asyncio.to_thread(self._list_all, kind)

    async def create(self, kind: RecordKind, draft: Any) -> int:
        return await asyncio.to_thread(self._create, kind, draft)

    async def update(self, kind: RecordKind, record_id: int, patch: Mapping[str, Any]) -> None:
        await asyncio.to_thread(self._update, kind, int(record_id), dict(patch))

    async def delete_by_id(self, kind: RecordKind, record_id: int) -> None:
        await asyncio.to_thread(self._delete, kind, int(record_id))

    def _list_all(self, kind: RecordKind) -> list[Any]:
        with db_cursor(self._conn_factory) as cur:
            cur.execute(_SELECTS[kind])
            mapper = _ROW_MAPPERS[kind]
            return [mapper(r) for r in cur.fetchall()]

    def _create(self, kind: RecordKind, draft: Any) -> int:
        with db_cursor(self._conn_factory) as cur:
            if isinstance(draft, AttendanceDraft):
                cur.execute(
                    """
                    INSERT INTO attendance_records(practice_id, work_date, attendance_type, check_in_time, check_out_time, notes)
                    VALUES(%s,%s,%s,%s,%s,%s)
                    """,
                    (
                        int(draft.practice_id),
                        draft.date,
                        (draft.attendance_type or AttendanceType.FULL_DAY).value,
                        draft.check_in_time,
                        draft.check_out_time,
                        draft.notes,
                    ),
                )
            elif isinstance(draft, ScheduleBlockDraft):
                cur.execute(
                    "INSERT INTO schedule_blocks(start_date, end_date, reason) VALUES(%s,%s,%s)",
                    (draft.start_date, draft.end_date, draft.reason),
                )
            elif isinstance(draft, PracticeDraft):
                cur.execute("INSERT INTO practices(name) VALUES(%s)", (draft.name,))
            else:
                raise ValidationError(f"Unsupported draft for {kind.value}: {type(draft).__name__}")

            record_id = int(cur.lastrowid)
            logger.debug("Inserted %s row %s", kind.value, record_id)
            return record_id

    def _update(self, kind: RecordKind, record_id: int, patch: Dict[str, Any]) -> None:
        columns = _PATCHABLE[kind]
        unknown = sorted(set(patch) - set(columns))
        if unknown:
            raise ValidationError(f"Cannot patch fields {unknown} on {kind.value}")

        table = _TABLES[kind]
        with db_cursor(self._conn_factory) as cur:
            # rowcount is 0 for no-op updates, so check existence explicitly.
            cur.execute(f"SELECT id FROM {table} WHERE id=%s", (record_id,))
            if cur.fetchone() is None:
                raise RecordNotFoundError(kind, record_id)
            if not patch:
                return

            assignments = ", ".join(f"{columns[field]}=%s" for field in patch)
            params = tuple(_column_value(v) for v in patch.values()) + (record_id,)
            cur.execute(f"UPDATE {table} SET {assignments} WHERE id=%s", params)

    def _delete(self, kind: RecordKind, record_id: int) -> None:
        with db_cursor(self._conn_factory) as cur:
            cur.execute(f"DELETE FROM {_TABLES[kind]} WHERE id=%s", (record_id,))
            if cur.rowcount <= 0:
                raise RecordNotFoundError(kind, record_id)
