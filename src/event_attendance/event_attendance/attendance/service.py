from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Optional

from ..codes.service import AttendanceCodeManager
from ..common.datetime_utils import now_local
from ..core.enums import WindowState
from ..core.exceptions import (
    CodeNotIssuedError,
    InvalidCodeError,
    NotApplicableError,
    NotFoundError,
    TooEarlyError,
    WindowClosedError,
)
from ..events.model import Event
from ..events.repository import EventRepository
from ..events.window import EventWindowResolver
from .factory import CheckInStrategyFactory
from .model import AttendanceRecord, CheckInResult
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


class CheckInProcessor:
    """Member self check-in.

    not_attended -> present | late, and nothing else: once a record exists
    (self-made or admin-made) a self check-in returns it untouched.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        events: EventRepository,
        codes: AttendanceCodeManager,
        *,
        resolver: Optional[EventWindowResolver] = None,
        strategy_factory: Optional[CheckInStrategyFactory] = None,
        clock: Callable[[], datetime] = now_local,
    ):
        self._attendance = attendance
        self._events = events
        self._codes = codes
        self._resolver = resolver or EventWindowResolver()
        self._factory = strategy_factory or CheckInStrategyFactory(resolver=self._resolver)
        self._clock = clock

    def check_in(
        self,
        event_id: int,
        member_id: str,
        *,
        now: Optional[datetime] = None,
        submitted_code: Optional[str] = None,
    ) -> CheckInResult:
        now = now or self._clock()

        event = self._events.get_by_id(int(event_id))
        if not event:
            raise NotFoundError("이벤트를 찾을 수 없습니다")
        if not event.is_attendance_required:
            raise NotApplicableError("출석 체크가 필요하지 않은 이벤트입니다")

        self._check_window(event, now)
        self._check_code(event, submitted_code)

        existing = self._attendance.get(event.event_id, member_id)
        if existing:
            return self._already_checked_in(existing)

        decision = self._factory.for_checkin(event=event, now=now).decide(event=event, now=now, resolver=self._resolver)
        created = self._attendance.insert_if_absent(
            event_id=event.event_id,
            member_id=member_id,
            status=decision.status,
            checked_in_at=now,
        )
        if created is None:
            # Lost the race on the unique key: whoever won owns the record.
            winner = self._attendance.get(event.event_id, member_id)
            if winner is None:
                raise RuntimeError("attendance insert conflicted but no record is readable")
            logger.debug("Concurrent check-in for event=%s member=%s resolved to existing record", event_id, member_id)
            return self._already_checked_in(winner)

        logger.info(
            "Check-in recorded: event=%s member=%s status=%s",
            event.event_id,
            member_id,
            created.status.value,
        )
        return CheckInResult(record=created, created=True, message=decision.message)

    def _check_window(self, event: Event, now: datetime) -> None:
        state = self._resolver.classify(event, now)
        if state == WindowState.OPEN:
            return

        window = self._resolver.effective_window(event)
        if state == WindowState.BEFORE:
            minutes = self._resolver.minutes_until_open(event, now)
            raise TooEarlyError(
                f"출석 가능 시간까지 {minutes}분 남았습니다",
                window_start=window.start,
                window_end=window.end,
                minutes_remaining=minutes,
            )
        raise WindowClosedError(
            "출석 가능 시간이 종료되었습니다",
            window_start=window.start,
            window_end=window.end,
        )

    def _check_code(self, event: Event, submitted_code: Optional[str]) -> None:
        if not event.is_attendance_code_required:
            return
        if not self._codes.has_active(event.event_id):
            raise CodeNotIssuedError("아직 출석 코드가 발급되지 않았습니다")
        if not self._codes.validate(event.event_id, submitted_code):
            raise InvalidCodeError("출석 코드가 올바르지 않습니다")

    @staticmethod
    def _already_checked_in(record: AttendanceRecord) -> CheckInResult:
        return CheckInResult(record=record, created=False, message="이미 출석 처리되었습니다")
