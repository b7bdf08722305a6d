from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class AttendanceCode:
    """The single live code of an event."""

    event_id: int
    code: str
    created_at: datetime


@dataclass(frozen=True)
class CodeCheckResult:
    is_valid: bool
    message: str
