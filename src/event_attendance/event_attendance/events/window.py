from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime, timedelta

from ..core.constants import DEFAULT_LATE_THRESHOLD_MINUTES
from ..core.enums import AttendanceStatus, WindowState
from .model import Event


@dataclass(frozen=True)
class AttendanceWindow:
    start: datetime
    end: datetime


class EventWindowResolver:
    """Pure timing rules for self check-in.

    The window is `[attendance_start_time, attendance_end_time]`, falling back
    to the event's own start/end. Both ends are inclusive.
    """

    def __init__(self, *, default_late_threshold_minutes: int = DEFAULT_LATE_THRESHOLD_MINUTES):
        self._default_threshold = int(default_late_threshold_minutes)

    def effective_window(self, event: Event) -> AttendanceWindow:
        return AttendanceWindow(
            start=event.attendance_start_time or event.start_time,
            end=event.attendance_end_time or event.end_time,
        )

    def classify(self, event: Event, now: datetime) -> WindowState:
        window = self.effective_window(event)
        if now < window.start:
            return WindowState.BEFORE
        if now > window.end:
            return WindowState.CLOSED
        return WindowState.OPEN

    def late_threshold(self, event: Event) -> int:
        if event.late_threshold_minutes is None or event.late_threshold_minutes < 0:
            return self._default_threshold
        return int(event.late_threshold_minutes)

    def late_boundary(self, event: Event) -> datetime:
        return self.effective_window(event).start + timedelta(minutes=self.late_threshold(event))

    def resolve_status(self, event: Event, now: datetime) -> AttendanceStatus:
        if self.classify(event, now) != WindowState.OPEN:
            raise ValueError("resolve_status() is only defined inside the attendance window")
        if now <= self.late_boundary(event):
            return AttendanceStatus.PRESENT
        return AttendanceStatus.LATE

    def minutes_until_open(self, event: Event, now: datetime) -> int:
        """Whole minutes left before the window opens (rounded up, 0 once open)."""

        remaining = (self.effective_window(event).start - now).total_seconds()
        if remaining <= 0:
            return 0
        return int(math.ceil(remaining / 60))

    def minutes_late(self, event: Event, now: datetime) -> int:
        late_by = (now - self.late_boundary(event)).total_seconds()
        if late_by <= 0:
            return 0
        return int(math.ceil(late_by / 60))
