from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from ..core.enums import AttendanceStatus
from ..events.model import Event
from ..events.window import EventWindowResolver
from .strategies.base import CheckInStrategy
from .strategies.late_strategy import LateStrategy
from .strategies.present_strategy import PresentStrategy


@dataclass
class CheckInStrategyFactory:
    """Factory Pattern: choose the check-in strategy from the window rules.

    Only meaningful while the window is open.
    """

    resolver: EventWindowResolver = field(default_factory=EventWindowResolver)

    def for_checkin(self, *, event: Event, now: datetime) -> CheckInStrategy:
        if self.resolver.resolve_status(event, now) == AttendanceStatus.PRESENT:
            return PresentStrategy()
        return LateStrategy()
