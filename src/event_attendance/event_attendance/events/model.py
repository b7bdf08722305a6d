from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.constants import DEFAULT_LATE_THRESHOLD_MINUTES


@dataclass(frozen=True)
class Event:
    """Domain entity: the attendance-relevant slice of an event.

    Title/description/location live with the event-editing service; only the
    fields the check-in engine reads are modelled here.
    """

    event_id: int
    title: str
    start_time: datetime
    end_time: datetime
    attendance_start_time: Optional[datetime] = None
    attendance_end_time: Optional[datetime] = None
    late_threshold_minutes: int = DEFAULT_LATE_THRESHOLD_MINUTES
    is_attendance_required: bool = True
    is_attendance_code_required: bool = False
    current_gen: int = 0
