from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime

from ...core.enums import AttendanceStatus
from ...events.model import Event
from ...events.window import EventWindowResolver


@dataclass(frozen=True)
class StatusDecision:
    status: AttendanceStatus
    message: str = ""


class CheckInStrategy(ABC):
    """Strategy Pattern: encapsulate how a self check-in is classified."""

    @abstractmethod
    def decide(self, *, event: Event, now: datetime, resolver: EventWindowResolver) -> StatusDecision:
        raise NotImplementedError
