from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol

from .model import AttendanceCode


class AttendanceCodeRepository(Protocol):
    def get_for_event(self, event_id: int) -> Optional[AttendanceCode]:
        raise NotImplementedError

    def replace(self, *, event_id: int, code: str, created_at: datetime) -> AttendanceCode:
        """Store `code` in the event's slot, overwriting any previous code in one write."""

        raise NotImplementedError

    def delete(self, event_id: int) -> bool:
        """Returns False when there was nothing to delete."""

        raise NotImplementedError
