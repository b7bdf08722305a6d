from __future__ import annotations

import csv
import io
from typing import Optional, Sequence, Union

from ..core.constants import DEFAULT_HISTORY_LIMIT
from ..core.enums import AttendanceStatus
from ..core.exceptions import NotFoundError, ValidationError
from ..events.repository import EventRepository
from ..participants.repository import ParticipantRepository
from .model import AttendanceRecord, AttendanceStats, RosterStatusRow
from .repository import AttendanceRepository


def parse_status_filter(value: Union[AttendanceStatus, str, None]) -> Optional[AttendanceStatus]:
    if value is None or isinstance(value, AttendanceStatus):
        return value
    v = value.strip().lower()
    if not v:
        return None
    try:
        return AttendanceStatus(v)
    except ValueError:
        raise ValidationError(f"알 수 없는 출석 상태입니다: {value!r}")


class AttendanceQueryService:
    """Read side: roster joined with attendance, and member history.

    A member with no record is reported as not_attended here; that status is
    never stored.
    """

    def __init__(self, attendance: AttendanceRepository, participants: ParticipantRepository, events: EventRepository):
        self._attendance = attendance
        self._participants = participants
        self._events = events

    def _require_event(self, event_id: int) -> None:
        if not self._events.get_by_id(int(event_id)):
            raise NotFoundError("이벤트를 찾을 수 없습니다")

    def roster_with_status(
        self,
        event_id: int,
        *,
        status_filter: Union[AttendanceStatus, str, None] = None,
        member_id_filter: Optional[str] = None,
    ) -> list[RosterStatusRow]:
        self._require_event(event_id)
        status = parse_status_filter(status_filter)

        enrolled = {p.member_id for p in self._participants.list_for_event(int(event_id))}
        records = {r.member_id: r for r in self._attendance.list_for_event(int(event_id))}

        rows: list[RosterStatusRow] = []
        for member_id in sorted(enrolled | set(records)):
            rec = records.get(member_id)
            row = RosterStatusRow(
                member_id=member_id,
                status=rec.status if rec else AttendanceStatus.NOT_ATTENDED,
                is_participant=member_id in enrolled,
                checked_in_at=rec.checked_in_at if rec else None,
                reason=rec.reason if rec else None,
                updated_by=rec.updated_by if rec else None,
            )
            if status is not None and row.status != status:
                continue
            if member_id_filter and member_id_filter.strip() not in member_id:
                continue
            rows.append(row)
        return rows

    def my_attendance(
        self,
        member_id: str,
        event_id: Optional[int] = None,
    ) -> Union[AttendanceRecord, Sequence[AttendanceRecord]]:
        """With `event_id`: that event's record, NotFound meaning "not attended".

        Without: the member's whole history.
        """

        if event_id is None:
            return self.my_history(member_id)
        self._require_event(event_id)
        record = self._attendance.get(int(event_id), member_id)
        if not record:
            raise NotFoundError("출석 기록이 없습니다")
        return record

    def my_history(
        self,
        member_id: str,
        *,
        status_filter: Union[AttendanceStatus, str, None] = None,
        limit: int = DEFAULT_HISTORY_LIMIT,
    ) -> Sequence[AttendanceRecord]:
        status = parse_status_filter(status_filter)
        if status == AttendanceStatus.NOT_ATTENDED:
            # Absence of a row is the only representation; there is nothing to list.
            return []
        return self._attendance.list_for_member(member_id, status=status, limit=int(limit))

    def stats(self, event_id: int) -> AttendanceStats:
        rows = self.roster_with_status(event_id)
        counts = {s: 0 for s in AttendanceStatus}
        for row in rows:
            counts[row.status] += 1

        total = len(rows)
        attended = counts[AttendanceStatus.PRESENT] + counts[AttendanceStatus.LATE]
        return AttendanceStats(
            total_members=total,
            present=counts[AttendanceStatus.PRESENT],
            late=counts[AttendanceStatus.LATE],
            absent=counts[AttendanceStatus.ABSENT],
            excused=counts[AttendanceStatus.EXCUSED],
            not_attended=counts[AttendanceStatus.NOT_ATTENDED],
            attendance_rate=round(attended / total, 4) if total else 0.0,
        )

    def export_roster_csv(self, event_id: int) -> str:
        out = io.StringIO()
        writer = csv.DictWriter(
            out,
            fieldnames=["member_id", "status", "is_participant", "checked_in_at", "reason", "updated_by"],
        )
        writer.writeheader()
        for row in self.roster_with_status(event_id):
            data = row.to_dict()
            data["checked_in_at"] = data["checked_in_at"] or ""
            data["reason"] = data["reason"] or ""
            data["updated_by"] = data["updated_by"] or ""
            writer.writerow(data)
        return out.getvalue()
