from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional, Sequence, Tuple

from mysql.connector.errors import IntegrityError

from ..core.enums import AttendanceStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, is_duplicate_key
from .model import AttendanceRecord
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)

_COLUMNS = "attendance_id, event_id, member_id, status, checked_in_at, reason, updated_by, updated_at"


def _to_record(r: dict) -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=int(r["attendance_id"]),
        event_id=int(r["event_id"]),
        member_id=r["member_id"],
        status=AttendanceStatus(r["status"]),
        checked_in_at=r.get("checked_in_at"),
        reason=r.get("reason"),
        updated_by=r.get("updated_by"),
        updated_at=r.get("updated_at"),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    @staticmethod
    def _select_one(cur, event_id: int, member_id: str) -> Optional[AttendanceRecord]:
        cur.execute(
            f"SELECT {_COLUMNS} FROM attendance_records WHERE event_id=%s AND member_id=%s",
            (int(event_id), member_id),
        )
        r = fetchone(cur)
        return _to_record(r) if r else None

    def get(self, event_id: int, member_id: str) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            return self._select_one(cur, event_id, member_id)

    def insert_if_absent(
        self,
        *,
        event_id: int,
        member_id: str,
        status: AttendanceStatus,
        checked_in_at: Optional[datetime],
    ) -> Optional[AttendanceRecord]:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO attendance_records(event_id, member_id, status, checked_in_at)
                    VALUES(%s,%s,%s,%s)
                    """,
                    (int(event_id), member_id, status.value, checked_in_at),
                )
                return self._select_one(cur, event_id, member_id)
        except IntegrityError as e:
            if not is_duplicate_key(e):
                raise
            logger.debug("Duplicate attendance insert for event=%s member=%s", event_id, member_id)
            return None

    def upsert(
        self,
        *,
        event_id: int,
        member_id: str,
        status: AttendanceStatus,
        checked_in_at: Optional[datetime],
        reason: Optional[str],
        updated_by: Optional[str],
    ) -> Tuple[AttendanceRecord, bool]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance_records(event_id, member_id, status, checked_in_at, reason, updated_by)
                VALUES(%s,%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    status=VALUES(status),
                    checked_in_at=VALUES(checked_in_at),
                    reason=VALUES(reason),
                    updated_by=VALUES(updated_by),
                    updated_at=CURRENT_TIMESTAMP
                """,
                (int(event_id), member_id, status.value, checked_in_at, reason, updated_by),
            )
            # MySQL reports 1 for a fresh insert, 2 for an update of an existing row.
            created = cur.rowcount == 1
            record = self._select_one(cur, event_id, member_id)
            if record is None:
                raise RuntimeError("attendance upsert did not persist a row")
            return record, created

    def update_reason(self, *, event_id: int, member_id: str, reason: str, updated_by: Optional[str]) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            # Affected-row counts skip unchanged rows, so the status is checked under a row lock instead.
            cur.execute(
                "SELECT status FROM attendance_records WHERE event_id=%s AND member_id=%s FOR UPDATE",
                (int(event_id), member_id),
            )
            r = fetchone(cur)
            if not r or r["status"] != AttendanceStatus.EXCUSED.value:
                return False
            cur.execute(
                """
                UPDATE attendance_records
                SET reason=%s, updated_by=%s, updated_at=CURRENT_TIMESTAMP
                WHERE event_id=%s AND member_id=%s
                """,
                (reason, updated_by, int(event_id), member_id),
            )
            return True

    def delete(self, event_id: int, member_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "DELETE FROM attendance_records WHERE event_id=%s AND member_id=%s",
                (int(event_id), member_id),
            )
            return cur.rowcount > 0

    def list_for_event(self, event_id: int) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance_records WHERE event_id=%s ORDER BY member_id ASC",
                (int(event_id),),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def list_for_member(
        self,
        member_id: str,
        *,
        status: Optional[AttendanceStatus] = None,
        limit: int = 200,
    ) -> Sequence[AttendanceRecord]:
        clauses = ["ar.member_id=%s"]
        params: list[object] = [member_id]
        if status is not None:
            clauses.append("ar.status=%s")
            params.append(status.value)
        params.append(int(limit))

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT ar.attendance_id, ar.event_id, ar.member_id, ar.status, ar.checked_in_at,
                       ar.reason, ar.updated_by, ar.updated_at
                FROM attendance_records ar
                JOIN events e ON e.event_id = ar.event_id
                WHERE {where}
                ORDER BY e.start_time DESC, ar.attendance_id DESC
                LIMIT %s
                """,
                tuple(params),
            )
            return [_to_record(r) for r in fetchall(cur)]
