from __future__ import annotations

from contextlib import contextmanager
from datetime import time, timedelta
from typing import Any, Iterator, Optional

from .connection import DatabaseConnection


@contextmanager
def db_cursor(conn_factory: DatabaseConnection) -> Iterator[Any]:
    """Dictionary cursor on a fresh connection, one transaction per block.

    Commits when the block exits cleanly, rolls back on any exception.
    """
    conn = conn_factory.connect()
    cur = conn.cursor(dictionary=True)
    try:
        yield cur
        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        cur.close()
        conn.close()


def time_column(value: Any) -> Optional[time]:
    """Check-in/check-out column value as `datetime.time`.

    mysql-connector hands TIME columns back as `timedelta` since midnight.
    """
    if value is None or isinstance(value, time):
        return value
    if isinstance(value, timedelta):
        seconds = int(value.total_seconds()) % 86400
        hours, rest = divmod(seconds, 3600)
        return time(hours, *divmod(rest, 60))
    if isinstance(value, str):
        return time.fromisoformat(value.strip())
    raise TypeError(f"Unsupported TIME column value: {value!r}")
