from __future__ import annotations

from datetime import datetime
from typing import Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, in_clause
from .model import Participant
from .repository import ParticipantRepository


class MySQLParticipantRepository(ParticipantRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_for_event(self, event_id: int) -> Sequence[Participant]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT event_id, member_id, added_at
                FROM event_participants
                WHERE event_id=%s
                ORDER BY member_id ASC
                """,
                (int(event_id),),
            )
            return [
                Participant(event_id=int(r["event_id"]), member_id=r["member_id"], added_at=r.get("added_at"))
                for r in fetchall(cur)
            ]

    def add_many(self, *, event_id: int, member_ids: Sequence[str], added_at: datetime) -> int:
        if not member_ids:
            return 0
        with db_cursor(self._conn_factory) as (_, cur):
            # INSERT IGNORE reports 1 per inserted row and 0 for rows skipped by the primary key.
            inserted = 0
            for member_id in member_ids:
                cur.execute(
                    "INSERT IGNORE INTO event_participants(event_id, member_id, added_at) VALUES(%s,%s,%s)",
                    (int(event_id), member_id, added_at),
                )
                inserted += max(cur.rowcount, 0)
            return inserted

    def remove_many(self, *, event_id: int, member_ids: Sequence[str]) -> int:
        if not member_ids:
            return 0
        ids = list(member_ids)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"DELETE FROM event_participants WHERE event_id=%s AND member_id IN ({in_clause(ids)})",
                (int(event_id), *ids),
            )
            return cur.rowcount
