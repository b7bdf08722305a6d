from __future__ import annotations

from datetime import timedelta

import pytest

from src.event_attendance.event_attendance.core.enums import AttendanceStatus, Role
from src.event_attendance.event_attendance.core.exceptions import (
    CodeNotIssuedError,
    InvalidCodeError,
    NotApplicableError,
    NotFoundError,
    TooEarlyError,
    WindowClosedError,
)
from tests.fakes import CODE_EVENT_ID, REGULAR_EVENT_ID, T0, UNTRACKED_EVENT_ID, make_event


def test_checkin_before_late_boundary_is_present(container, attendance_repo):
    result = container.checkin_processor.check_in(REGULAR_EVENT_ID, "m1", now=T0 + timedelta(minutes=14, seconds=59))

    assert result.created is True
    assert result.record.status == AttendanceStatus.PRESENT
    assert result.record.checked_in_at == T0 + timedelta(minutes=14, seconds=59)
    assert result.record.updated_by is None
    assert attendance_repo.get(REGULAR_EVENT_ID, "m1") == result.record


def test_checkin_after_late_boundary_is_late(container):
    result = container.checkin_processor.check_in(REGULAR_EVENT_ID, "m1", now=T0 + timedelta(minutes=15, seconds=1))

    assert result.record.status == AttendanceStatus.LATE


def test_checkin_one_second_early_fails_with_window_bounds(container, attendance_repo):
    with pytest.raises(TooEarlyError) as exc:
        container.checkin_processor.check_in(REGULAR_EVENT_ID, "m1", now=T0 - timedelta(seconds=1))

    assert exc.value.window_start == T0
    assert exc.value.window_end == T0 + timedelta(hours=2)
    assert exc.value.minutes_remaining == 1
    assert "1분 남았습니다" in str(exc.value)
    assert attendance_repo.get(REGULAR_EVENT_ID, "m1") is None


def test_checkin_after_window_end_fails(container, events):
    events.add(make_event(10, attendance_end_time=T0 + timedelta(minutes=30)))

    with pytest.raises(WindowClosedError) as exc:
        container.checkin_processor.check_in(10, "m1", now=T0 + timedelta(minutes=30, seconds=1))

    assert exc.value.window_end == T0 + timedelta(minutes=30)


def test_unknown_event_is_not_found(container):
    with pytest.raises(NotFoundError):
        container.checkin_processor.check_in(999, "m1", now=T0)


def test_event_without_attendance_is_not_applicable(container):
    with pytest.raises(NotApplicableError):
        container.checkin_processor.check_in(UNTRACKED_EVENT_ID, "m1", now=T0)


def test_code_required_without_active_code_fails_regardless_of_timing(container):
    for now in (T0, T0 + timedelta(minutes=30)):
        with pytest.raises(CodeNotIssuedError):
            container.checkin_processor.check_in(CODE_EVENT_ID, "m1", now=now, submitted_code="ANY")


def test_window_is_checked_before_code(container):
    with pytest.raises(TooEarlyError):
        container.checkin_processor.check_in(CODE_EVENT_ID, "m1", now=T0 - timedelta(minutes=5))


def test_code_gating_lifecycle(container, codes_repo):
    codes_repo.replace(event_id=CODE_EVENT_ID, code="ABC123", created_at=T0)
    processor = container.checkin_processor

    with pytest.raises(InvalidCodeError):
        processor.check_in(CODE_EVENT_ID, "m1", now=T0, submitted_code="WRONG")
    with pytest.raises(InvalidCodeError):
        processor.check_in(CODE_EVENT_ID, "m1", now=T0)

    ok = processor.check_in(CODE_EVENT_ID, "m1", now=T0, submitted_code="ABC123")
    assert ok.record.status == AttendanceStatus.PRESENT

    container.code_manager.revoke(CODE_EVENT_ID)
    with pytest.raises(CodeNotIssuedError):
        processor.check_in(CODE_EVENT_ID, "m2", now=T0, submitted_code="ABC123")


def test_second_checkin_returns_existing_record_unchanged(container, attendance_repo):
    first = container.checkin_processor.check_in(REGULAR_EVENT_ID, "m1", now=T0 + timedelta(minutes=1))
    second = container.checkin_processor.check_in(REGULAR_EVENT_ID, "m1", now=T0 + timedelta(minutes=50))

    assert second.created is False
    assert second.record == first.record
    assert second.record.status == AttendanceStatus.PRESENT
    assert attendance_repo.insert_count == 1


def test_admin_absent_is_not_overwritten_by_self_checkin(container):
    container.override_service.set_status(
        current_role=Role.ADMIN,
        admin_member_id="admin",
        event_id=REGULAR_EVENT_ID,
        member_id="m1",
        status=AttendanceStatus.ABSENT,
    )

    result = container.checkin_processor.check_in(REGULAR_EVENT_ID, "m1", now=T0 + timedelta(minutes=1))

    assert result.created is False
    assert result.record.status == AttendanceStatus.ABSENT
    assert result.record.updated_by == "admin"


def test_member_not_on_roster_may_still_check_in(container, participants_repo):
    assert participants_repo.list_for_event(REGULAR_EVENT_ID) == []

    result = container.checkin_processor.check_in(REGULAR_EVENT_ID, "walk-in", now=T0)

    assert result.created is True


def test_checkin_uses_clock_when_now_is_omitted(events, attendance_repo, codes_repo):
    from src.event_attendance.event_attendance.attendance.service import CheckInProcessor
    from src.event_attendance.event_attendance.codes.service import AttendanceCodeManager

    processor = CheckInProcessor(
        attendance_repo,
        events,
        AttendanceCodeManager(codes_repo, events),
        clock=lambda: T0 + timedelta(minutes=20),
    )

    result = processor.check_in(REGULAR_EVENT_ID, "m1")

    assert result.record.status == AttendanceStatus.LATE
    assert result.record.checked_in_at == T0 + timedelta(minutes=20)


def test_numeric_code_submission_is_compared_as_text(container, codes_repo):
    codes_repo.replace(event_id=CODE_EVENT_ID, code="234567", created_at=T0)

    with pytest.raises(InvalidCodeError):
        container.checkin_processor.check_in(CODE_EVENT_ID, "m1", now=T0, submitted_code=765432)

    result = container.checkin_processor.check_in(CODE_EVENT_ID, "m1", now=T0, submitted_code=234567)
    assert result.created is True
