from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from ..core.enums import AttendanceStatus


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one member's attendance at one event.

    At most one exists per (event_id, member_id). `updated_by` is the admin's
    member id, or None when the member checked in themselves.
    """

    attendance_id: int
    event_id: int
    member_id: str
    status: AttendanceStatus
    checked_in_at: Optional[datetime] = None
    reason: Optional[str] = None
    updated_by: Optional[str] = None
    updated_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "id": self.attendance_id,
            "event_id": self.event_id,
            "member_id": self.member_id,
            "status": self.status.value,
            "checked_in_at": self.checked_in_at.isoformat() if self.checked_in_at else None,
            "reason": self.reason,
            "updated_by": self.updated_by,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }


@dataclass(frozen=True)
class CheckInResult:
    record: AttendanceRecord
    created: bool
    message: str = ""


@dataclass(frozen=True)
class RosterStatusRow:
    """Read-model: roster member (or recorded non-member) with effective status."""

    member_id: str
    status: AttendanceStatus
    is_participant: bool
    checked_in_at: Optional[datetime] = None
    reason: Optional[str] = None
    updated_by: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "member_id": self.member_id,
            "status": self.status.value,
            "is_participant": self.is_participant,
            "checked_in_at": self.checked_in_at.isoformat() if self.checked_in_at else None,
            "reason": self.reason,
            "updated_by": self.updated_by,
        }


@dataclass(frozen=True)
class AttendanceStats:
    total_members: int
    present: int
    late: int
    absent: int
    excused: int
    not_attended: int
    attendance_rate: float


@dataclass(frozen=True)
class OverrideEntry:
    member_id: str
    status: AttendanceStatus
    reason: Optional[str] = None
    checked_in_at: Optional[datetime] = None


@dataclass
class BulkOverrideResult:
    created: int = 0
    updated: int = 0
    errors: list[str] = field(default_factory=list)
