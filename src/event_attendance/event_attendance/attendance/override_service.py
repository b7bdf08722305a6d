from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Iterable, Optional, Tuple, Union

from ..common.datetime_utils import now_local, parse_iso_datetime
from ..common.validators import require_non_empty
from ..core.enums import AttendanceStatus, Role
from ..core.exceptions import AuthorizationError, DomainError, InvalidStateError, NotFoundError, ValidationError
from ..events.repository import EventRepository
from .model import AttendanceRecord, BulkOverrideResult, OverrideEntry
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


def _as_datetime(value) -> Optional[datetime]:
    if value is None or isinstance(value, datetime):
        return value
    return parse_iso_datetime(str(value))


def parse_status(value: Union[AttendanceStatus, str, None]) -> AttendanceStatus:
    if isinstance(value, AttendanceStatus):
        status = value
    else:
        try:
            status = AttendanceStatus((value or "").strip().lower())
        except ValueError:
            raise ValidationError(f"알 수 없는 출석 상태입니다: {value!r}")
    if status not in AttendanceStatus.stored():
        raise ValidationError("미출석 상태는 직접 지정할 수 없습니다. 출석 기록을 삭제해 주세요")
    return status


class AttendanceOverrideService:
    """Administrator corrections.

    No window or code checks apply. Writes are last-write-wins: two admins
    editing the same record simply overwrite each other in arrival order.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        events: EventRepository,
        *,
        clock: Callable[[], datetime] = now_local,
    ):
        self._attendance = attendance
        self._events = events
        self._clock = clock

    @staticmethod
    def _require_admin(current_role: Role) -> None:
        if current_role != Role.ADMIN:
            raise AuthorizationError("관리자만 출석 정보를 수정할 수 있습니다")

    def _require_event(self, event_id: int) -> None:
        if not self._events.get_by_id(int(event_id)):
            raise NotFoundError("이벤트를 찾을 수 없습니다")

    def set_status(
        self,
        *,
        current_role: Role,
        admin_member_id: str,
        event_id: int,
        member_id: str,
        status: Union[AttendanceStatus, str],
        reason: Optional[str] = None,
        checked_in_at: Optional[datetime] = None,
    ) -> AttendanceRecord:
        self._require_admin(current_role)
        self._require_event(event_id)
        record, _ = self._apply(
            admin_member_id=admin_member_id,
            event_id=int(event_id),
            member_id=require_non_empty(member_id, "멤버 ID"),
            status=parse_status(status),
            reason=reason,
            checked_in_at=checked_in_at,
        )
        return record

    def _apply(
        self,
        *,
        admin_member_id: str,
        event_id: int,
        member_id: str,
        status: AttendanceStatus,
        reason: Optional[str],
        checked_in_at: Optional[datetime],
    ) -> Tuple[AttendanceRecord, bool]:
        if status == AttendanceStatus.EXCUSED:
            reason = require_non_empty(reason or "", "사유결석 사유")
        else:
            reason = None

        if status in (AttendanceStatus.PRESENT, AttendanceStatus.LATE):
            if checked_in_at is None:
                existing = self._attendance.get(event_id, member_id)
                checked_in_at = existing.checked_in_at if existing and existing.checked_in_at else self._clock()
        else:
            checked_in_at = None

        record, created = self._attendance.upsert(
            event_id=event_id,
            member_id=member_id,
            status=status,
            checked_in_at=checked_in_at,
            reason=reason,
            updated_by=admin_member_id,
        )
        logger.info(
            "Attendance override: event=%s member=%s status=%s by=%s (%s)",
            event_id,
            member_id,
            status.value,
            admin_member_id,
            "created" if created else "updated",
        )
        return record, created

    def update_excused_reason(
        self,
        *,
        current_role: Role,
        admin_member_id: str,
        event_id: int,
        member_id: str,
        reason: str,
    ) -> AttendanceRecord:
        self._require_admin(current_role)
        reason = require_non_empty(reason, "사유결석 사유")

        record = self._attendance.get(int(event_id), member_id)
        if not record:
            raise NotFoundError("출석 기록을 찾을 수 없습니다")
        if record.status != AttendanceStatus.EXCUSED:
            raise InvalidStateError("사유결석 상태인 기록만 사유를 수정할 수 있습니다")

        ok = self._attendance.update_reason(
            event_id=int(event_id),
            member_id=member_id,
            reason=reason,
            updated_by=admin_member_id,
        )
        if not ok:
            # Status changed between the read and the write.
            raise InvalidStateError("사유결석 상태인 기록만 사유를 수정할 수 있습니다")

        logger.info("Excused reason updated: event=%s member=%s by=%s", event_id, member_id, admin_member_id)
        updated = self._attendance.get(int(event_id), member_id)
        if not updated:
            raise NotFoundError("출석 기록을 찾을 수 없습니다")
        return updated

    def clear(self, *, current_role: Role, admin_member_id: str, event_id: int, member_id: str) -> bool:
        """Drop the record so the member is back to not_attended. Idempotent."""

        self._require_admin(current_role)
        deleted = self._attendance.delete(int(event_id), member_id)
        if deleted:
            logger.info("Attendance cleared: event=%s member=%s by=%s", event_id, member_id, admin_member_id)
        return deleted

    def bulk_set(
        self,
        *,
        current_role: Role,
        admin_member_id: str,
        event_id: int,
        entries: Iterable[Union[OverrideEntry, dict]],
    ) -> BulkOverrideResult:
        self._require_admin(current_role)
        self._require_event(event_id)

        result = BulkOverrideResult()
        for index, raw in enumerate(entries):
            try:
                entry = self._to_entry(raw)
                _, created = self._apply(
                    admin_member_id=admin_member_id,
                    event_id=int(event_id),
                    member_id=entry.member_id,
                    status=entry.status,
                    reason=entry.reason,
                    checked_in_at=entry.checked_in_at,
                )
            except DomainError as e:
                if isinstance(raw, OverrideEntry):
                    label = raw.member_id
                elif isinstance(raw, dict) and raw.get("member_id"):
                    label = raw["member_id"]
                else:
                    label = f"#{index}"
                result.errors.append(f"{label}: {e}")
                continue

            if created:
                result.created += 1
            else:
                result.updated += 1
        return result

    @staticmethod
    def _to_entry(raw: Union[OverrideEntry, dict]) -> OverrideEntry:
        if isinstance(raw, OverrideEntry):
            return OverrideEntry(
                member_id=require_non_empty(raw.member_id, "멤버 ID"),
                status=parse_status(raw.status),
                reason=raw.reason,
                checked_in_at=raw.checked_in_at,
            )
        if not isinstance(raw, dict):
            raise ValidationError("출석 항목 형식이 올바르지 않습니다")
        return OverrideEntry(
            member_id=require_non_empty(str(raw.get("member_id") or ""), "멤버 ID"),
            status=parse_status(raw.get("status")),
            reason=raw.get("reason"),
            checked_in_at=_as_datetime(raw.get("checked_in_at")),
        )
