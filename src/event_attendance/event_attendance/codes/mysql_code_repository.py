from __future__ import annotations

from datetime import datetime
from typing import Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .model import AttendanceCode
from .repository import AttendanceCodeRepository


class MySQLAttendanceCodeRepository(AttendanceCodeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_for_event(self, event_id: int) -> Optional[AttendanceCode]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT event_id, code, created_at FROM attendance_codes WHERE event_id=%s",
                (int(event_id),),
            )
            r = fetchone(cur)
            if not r:
                return None
            return AttendanceCode(event_id=int(r["event_id"]), code=r["code"], created_at=r["created_at"])

    def replace(self, *, event_id: int, code: str, created_at: datetime) -> AttendanceCode:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance_codes(event_id, code, created_at)
                VALUES(%s,%s,%s)
                ON DUPLICATE KEY UPDATE code=VALUES(code), created_at=VALUES(created_at)
                """,
                (int(event_id), code, created_at),
            )
        return AttendanceCode(event_id=int(event_id), code=code, created_at=created_at)

    def delete(self, event_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM attendance_codes WHERE event_id=%s", (int(event_id),))
            return cur.rowcount > 0
