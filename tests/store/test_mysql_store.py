from __future__ import annotations

from datetime import date, time, timedelta

import pytest

from dentrak.attendance.model import AttendanceDraft
from dentrak.core.enums import AttendanceType, RecordKind
from dentrak.core.exceptions import RecordNotFoundError, ValidationError
from dentrak.database.mysql_base import time_column
from dentrak.schedules.model import ScheduleBlockDraft
from dentrak.store.mysql_store import MySQLRecordStore


class FakeCursor:
    def __init__(self, conn):
        self._conn = conn
        self.rowcount = 0
        self.lastrowid = None
        self._result = []

    def execute(self, sql, params=None):
        sql = " ".join(sql.split())
        self._conn.executed.append((sql, params))
        self._result = list(self._conn.results.pop(0)) if self._conn.results else []
        self.rowcount = self._conn.rowcount
        self.lastrowid = self._conn.lastrowid

    def fetchone(self):
        return self._result[0] if self._result else None

    def fetchall(self):
        return self._result

    def close(self):
        pass


class FakeConnection:
    def __init__(self, results=(), *, rowcount=1, lastrowid=None):
        self.results = list(results)
        self.rowcount = rowcount
        self.lastrowid = lastrowid
        self.executed = []
        self.committed = 0
        self.rolled_back = 0
        self.closed = 0

    def cursor(self, dictionary=False):
        return FakeCursor(self)

    def commit(self):
        self.committed += 1

    def rollback(self):
        self.rolled_back += 1

    def close(self):
        self.closed += 1


class FakeFactory:
    def __init__(self, conn: FakeConnection):
        self.conn = conn

    def connect(self, *, with_database: bool = True):
        return self.conn


@pytest.mark.asyncio
async def test_list_attendance_maps_rows():
    conn = FakeConnection(
        results=[
            [
                {
                    "id": 3,
                    "practice_id": 7,
                    "work_date": date(2024, 3, 1),
                    "attendance_type": "HALF_DAY",
                    "check_in_time": timedelta(hours=8, minutes=30),
                    "check_out_time": None,
                    "notes": "Work day (Bulk/Single Add)",
                }
            ]
        ]
    )
    store = MySQLRecordStore(FakeFactory(conn))

    (record,) = await store.list_all(RecordKind.ATTENDANCE)

    assert record.id == 3
    assert record.date == date(2024, 3, 1)
    assert record.attendance_type == AttendanceType.HALF_DAY
    assert record.check_in_time == time(8, 30)
    assert conn.executed[0][0].startswith("SELECT id, practice_id, work_date")
    assert conn.committed == 1 and conn.closed == 1


@pytest.mark.asyncio
async def test_create_returns_last_row_id():
    conn = FakeConnection(lastrowid=42)
    store = MySQLRecordStore(FakeFactory(conn))

    new_id = await store.create(RecordKind.ATTENDANCE, AttendanceDraft(date=date(2024, 3, 1), practice_id=7))

    assert new_id == 42
    sql, params = conn.executed[0]
    assert sql.startswith("INSERT INTO attendance_records")
    assert params[:3] == (7, date(2024, 3, 1), "FULL_DAY")


@pytest.mark.asyncio
async def test_create_block():
    conn = FakeConnection(lastrowid=5)
    store = MySQLRecordStore(FakeFactory(conn))

    assert await store.create(RecordKind.SCHEDULE_BLOCKS, ScheduleBlockDraft.single_day(date(2024, 1, 1))) == 5
    assert conn.executed[0][1] == (date(2024, 1, 1), date(2024, 1, 1), "Blocked")


@pytest.mark.asyncio
async def test_update_maps_fields_to_columns():
    conn = FakeConnection(results=[[{"id": 3}]])
    store = MySQLRecordStore(FakeFactory(conn))

    await store.update(RecordKind.ATTENDANCE, 3, {"attendance_type": AttendanceType.HALF_DAY, "date": date(2024, 3, 2)})

    sql, params = conn.executed[1]
    assert sql == "UPDATE attendance_records SET attendance_type=%s, work_date=%s WHERE id=%s"
    assert params == ("HALF_DAY", date(2024, 3, 2), 3)


@pytest.mark.asyncio
async def test_update_missing_row_raises_and_rolls_back():
    conn = FakeConnection(results=[[]])
    store = MySQLRecordStore(FakeFactory(conn))

    with pytest.raises(RecordNotFoundError):
        await store.update(RecordKind.ATTENDANCE, 3, {"notes": "x"})
    assert conn.rolled_back == 1
    assert conn.committed == 0


@pytest.mark.asyncio
async def test_update_unknown_field_is_rejected_before_connecting():
    conn = FakeConnection()
    store = MySQLRecordStore(FakeFactory(conn))

    with pytest.raises(ValidationError):
        await store.update(RecordKind.SCHEDULE_BLOCKS, 1, {"practice_id": 2})
    assert conn.executed == []


@pytest.mark.asyncio
async def test_delete_missing_row_raises():
    conn = FakeConnection(rowcount=0)
    store = MySQLRecordStore(FakeFactory(conn))

    with pytest.raises(RecordNotFoundError):
        await store.delete_by_id(RecordKind.SCHEDULE_BLOCKS, 9)
    assert conn.executed == [("DELETE FROM schedule_blocks WHERE id=%s", (9,))]


def test_time_column_accepts_connector_values():
    assert time_column(None) is None
    assert time_column(timedelta(hours=17, minutes=5, seconds=9)) == time(17, 5, 9)
    assert time_column("08:30") == time(8, 30)
    assert time_column(time(9, 0)) == time(9, 0)
    with pytest.raises(TypeError):
        time_column(830)
