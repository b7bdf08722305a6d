from __future__ import annotations

from datetime import datetime

from ...core.enums import AttendanceStatus
from ...events.model import Event
from ...events.window import EventWindowResolver
from .base import CheckInStrategy, StatusDecision


class LateStrategy(CheckInStrategy):
    """Check-in after the late boundary but still inside the window."""

    def decide(self, *, event: Event, now: datetime, resolver: EventWindowResolver) -> StatusDecision:
        minutes = resolver.minutes_late(event, now)
        return StatusDecision(status=AttendanceStatus.LATE, message=f"지각 처리되었습니다 ({minutes}분 지각)")
