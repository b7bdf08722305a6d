from __future__ import annotations

from datetime import datetime

from ...core.enums import AttendanceStatus
from ...events.model import Event
from ...events.window import EventWindowResolver
from .base import CheckInStrategy, StatusDecision


class PresentStrategy(CheckInStrategy):
    """Check-in at or before the late boundary."""

    def decide(self, *, event: Event, now: datetime, resolver: EventWindowResolver) -> StatusDecision:
        return StatusDecision(status=AttendanceStatus.PRESENT, message="출석 처리되었습니다")
