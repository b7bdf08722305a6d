from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Caller role. Admin capability is granted by the external auth layer."""

    ADMIN = "admin"
    MEMBER = "member"


class AttendanceStatus(str, Enum):
    """출석 상태.

    NOT_ATTENDED is never persisted: it is what a missing row means.
    """

    NOT_ATTENDED = "not_attended"
    PRESENT = "present"
    LATE = "late"
    ABSENT = "absent"
    EXCUSED = "excused"

    @classmethod
    def stored(cls) -> tuple["AttendanceStatus", ...]:
        return (cls.PRESENT, cls.LATE, cls.ABSENT, cls.EXCUSED)


class WindowState(str, Enum):
    """Position of a moment relative to an event's attendance window."""

    BEFORE = "before"
    OPEN = "open"
    CLOSED = "closed"
