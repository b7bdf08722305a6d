from __future__ import annotations

from typing import Optional

from ..core.constants import DEFAULT_LATE_THRESHOLD_MINUTES
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .model import Event
from .repository import EventRepository


class MySQLEventRepository(EventRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, event_id: int) -> Optional[Event]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT event_id, title, start_time, end_time,
                       attendance_start_time, attendance_end_time, late_threshold_minutes,
                       is_attendance_required, is_attendance_code_required, current_gen
                FROM events
                WHERE event_id=%s
                """,
                (int(event_id),),
            )
            r = fetchone(cur)
            if not r:
                return None
            threshold = r.get("late_threshold_minutes")
            return Event(
                event_id=int(r["event_id"]),
                title=r["title"],
                start_time=r["start_time"],
                end_time=r["end_time"],
                attendance_start_time=r.get("attendance_start_time"),
                attendance_end_time=r.get("attendance_end_time"),
                late_threshold_minutes=int(threshold) if threshold is not None else DEFAULT_LATE_THRESHOLD_MINUTES,
                is_attendance_required=bool(r["is_attendance_required"]),
                is_attendance_code_required=bool(r["is_attendance_code_required"]),
                current_gen=int(r.get("current_gen") or 0),
            )
