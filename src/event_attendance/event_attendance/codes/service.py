from __future__ import annotations

import hmac
import io
import logging
import secrets
from datetime import datetime
from typing import Callable, Optional

import qrcode

from ..common.datetime_utils import now_local
from ..core.constants import ATTENDANCE_CODE_ALPHABET, ATTENDANCE_CODE_LENGTH
from ..core.exceptions import NotFoundError
from ..events.model import Event
from ..events.repository import EventRepository
from .model import AttendanceCode, CodeCheckResult
from .repository import AttendanceCodeRepository

logger = logging.getLogger(__name__)


def random_code(length: int = ATTENDANCE_CODE_LENGTH, alphabet: str = ATTENDANCE_CODE_ALPHABET) -> str:
    return "".join(secrets.choice(alphabet) for _ in range(int(length)))


class AttendanceCodeManager:
    """Owns the one live attendance code per event."""

    def __init__(
        self,
        codes: AttendanceCodeRepository,
        events: EventRepository,
        *,
        code_factory: Optional[Callable[[], str]] = None,
        clock: Callable[[], datetime] = now_local,
    ):
        self._codes = codes
        self._events = events
        self._code_factory = code_factory or random_code
        self._clock = clock

    def _require_event(self, event_id: int) -> Event:
        event = self._events.get_by_id(int(event_id))
        if not event:
            raise NotFoundError("이벤트를 찾을 수 없습니다")
        return event

    def generate(self, event_id: int) -> AttendanceCode:
        event = self._require_event(event_id)
        if not event.is_attendance_code_required:
            raise NotFoundError("출석 코드를 사용하지 않는 이벤트입니다")

        code = self._codes.replace(event_id=event.event_id, code=self._code_factory(), created_at=self._clock())
        logger.info("Attendance code issued for event %s", event.event_id)
        return code

    def revoke(self, event_id: int) -> None:
        if self._codes.delete(int(event_id)):
            logger.info("Attendance code revoked for event %s", event_id)

    def get_active(self, event_id: int) -> AttendanceCode:
        self._require_event(event_id)
        code = self._codes.get_for_event(int(event_id))
        if not code:
            raise NotFoundError("발급된 출석 코드가 없습니다")
        return code

    def has_active(self, event_id: int) -> bool:
        return self._codes.get_for_event(int(event_id)) is not None

    def validate(self, event_id: int, submitted_code: Optional[str]) -> bool:
        # JSON clients may send an all-digit code as a number.
        submitted = "" if submitted_code is None else str(submitted_code).strip()
        if not submitted:
            return False
        active = self._codes.get_for_event(int(event_id))
        if not active:
            return False
        return hmac.compare_digest(active.code.encode("utf-8"), submitted.encode("utf-8"))

    def check(self, event_id: int, submitted_code: Optional[str]) -> CodeCheckResult:
        """Let a member verify a code before checking in; no record is written."""

        event = self._require_event(event_id)
        if not event.is_attendance_code_required:
            return CodeCheckResult(is_valid=True, message="출석 코드가 필요하지 않은 이벤트입니다")
        if not self.has_active(event.event_id):
            return CodeCheckResult(is_valid=False, message="아직 출석 코드가 발급되지 않았습니다")
        if self.validate(event.event_id, submitted_code):
            return CodeCheckResult(is_valid=True, message="올바른 출석 코드입니다")
        return CodeCheckResult(is_valid=False, message="출석 코드가 올바르지 않습니다")

    def render_qr_png(self, event_id: int) -> bytes:
        """PNG QR image of the active code, for display at the venue."""

        active = self.get_active(event_id)

        qr = qrcode.QRCode(
            version=1,
            error_correction=qrcode.constants.ERROR_CORRECT_L,
            box_size=10,
            border=2,
        )
        qr.add_data(active.code)
        qr.make(fit=True)

        img = qr.make_image(fill_color="black", back_color="white")

        buf = io.BytesIO()
        img.save(buf, format="PNG")
        return buf.getvalue()
