from __future__ import annotations

from datetime import datetime
from typing import Optional


class DomainError(Exception):
    """Base exception for business rule violations.

    `code` is a stable machine-readable kind; str(err) is the user-facing message.
    """

    code = "DOMAIN_ERROR"

    def to_dict(self) -> dict:
        return {"code": self.code, "message": str(self)}


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""

    code = "VALIDATION_ERROR"


class AuthorizationError(DomainError):
    """Raised when a caller lacks permission for an action."""

    code = "UNAUTHORIZED"


class NotFoundError(DomainError):
    """Event, record or attendance code does not exist."""

    code = "NOT_FOUND"


class NotApplicableError(DomainError):
    """Attendance is not tracked for this event."""

    code = "NOT_APPLICABLE"


class InvalidStateError(DomainError):
    """Operation is not allowed for the record's current status."""

    code = "INVALID_STATE"


class CodeNotIssuedError(DomainError):
    """The event requires a code but none is active."""

    code = "CODE_NOT_ISSUED"


class InvalidCodeError(DomainError):
    code = "INVALID_CODE"


class _WindowError(DomainError):
    def __init__(self, message: str, *, window_start: datetime, window_end: datetime):
        super().__init__(message)
        self.window_start = window_start
        self.window_end = window_end

    def to_dict(self) -> dict:
        data = super().to_dict()
        data["window_start"] = self.window_start.isoformat()
        data["window_end"] = self.window_end.isoformat()
        return data


class TooEarlyError(_WindowError):
    code = "TOO_EARLY"

    def __init__(
        self,
        message: str,
        *,
        window_start: datetime,
        window_end: datetime,
        minutes_remaining: Optional[int] = None,
    ):
        super().__init__(message, window_start=window_start, window_end=window_end)
        self.minutes_remaining = minutes_remaining

    def to_dict(self) -> dict:
        data = super().to_dict()
        data["minutes_remaining"] = self.minutes_remaining
        return data


class WindowClosedError(_WindowError):
    code = "WINDOW_CLOSED"
