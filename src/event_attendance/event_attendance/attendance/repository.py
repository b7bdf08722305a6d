from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence, Tuple

from ..core.enums import AttendanceStatus
from .model import AttendanceRecord


class AttendanceRepository(Protocol):
    def get(self, event_id: int, member_id: str) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def insert_if_absent(
        self,
        *,
        event_id: int,
        member_id: str,
        status: AttendanceStatus,
        checked_in_at: Optional[datetime],
    ) -> Optional[AttendanceRecord]:
        """Atomic "insert if absent" keyed by the (event_id, member_id) unique key.

        Returns the new record, or None when a row already existed (including
        one written concurrently). Must never overwrite an existing row.
        """

        raise NotImplementedError

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
        """Admin-only create-or-overwrite. Returns (record, created)."""

        raise NotImplementedError

    def update_reason(self, *, event_id: int, member_id: str, reason: str, updated_by: Optional[str]) -> bool:
        """Replace the reason of an excused record.

        True whenever the record exists and is excused, even if the reason is
        unchanged; False otherwise.
        """

        raise NotImplementedError

    def delete(self, event_id: int, member_id: str) -> bool:
        raise NotImplementedError

    def list_for_event(self, event_id: int) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def list_for_member(
        self,
        member_id: str,
        *,
        status: Optional[AttendanceStatus] = None,
        limit: int = 200,
    ) -> Sequence[AttendanceRecord]:
        """Newest first."""

        raise NotImplementedError
