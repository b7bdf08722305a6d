from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from datetime import timedelta

import pytest

from src.event_attendance.event_attendance.container import assemble
from src.event_attendance.event_attendance.core.enums import AttendanceStatus
from tests.fakes import (
    REGULAR_EVENT_ID,
    T0,
    InMemoryAttendance,
    InMemoryCodes,
    InMemoryParticipants,
    RacingAttendance,
)


def _build(events, attendance_repo):
    return assemble(
        events_repo=events,
        codes_repo=InMemoryCodes(),
        participants_repo=InMemoryParticipants(),
        attendance_repo=attendance_repo,
    )


@pytest.mark.parametrize("parties", [2, 8, 32])
def test_racing_checkins_create_exactly_one_record(events, parties):
    repo = RacingAttendance(parties)
    container = _build(events, repo)
    # Spread timestamps across the late boundary: whichever insert wins decides the status.
    moments = [T0 + timedelta(minutes=14, seconds=50) + timedelta(seconds=i) for i in range(parties)]

    with ThreadPoolExecutor(max_workers=parties) as pool:
        results = list(
            pool.map(lambda now: container.checkin_processor.check_in(REGULAR_EVENT_ID, "m1", now=now), moments)
        )

    assert repo.insert_count == 1
    assert sum(1 for r in results if r.created) == 1
    assert sum(1 for r in results if not r.created) == parties - 1

    stored = repo.get(REGULAR_EVENT_ID, "m1")
    assert all(r.record == stored for r in results)

    winner = next(r for r in results if r.created)
    expected = container.window_resolver.resolve_status(container.events_repo.get_by_id(REGULAR_EVENT_ID), winner.record.checked_in_at)
    assert stored.status == expected
    assert stored.checked_in_at in moments


def test_parallel_checkins_of_different_members_are_independent(events):
    repo = InMemoryAttendance()
    container = _build(events, repo)
    members = [f"m{i}" for i in range(50)]

    with ThreadPoolExecutor(max_workers=10) as pool:
        results = list(
            pool.map(lambda m: container.checkin_processor.check_in(REGULAR_EVENT_ID, m, now=T0), members)
        )

    assert all(r.created for r in results)
    assert repo.insert_count == len(members)
    assert {r.record.member_id for r in results} == set(members)
    assert all(r.record.status == AttendanceStatus.PRESENT for r in results)


def test_repeated_checkins_from_many_threads_never_duplicate(events):
    repo = InMemoryAttendance()
    container = _build(events, repo)

    with ThreadPoolExecutor(max_workers=16) as pool:
        results = list(
            pool.map(
                lambda i: container.checkin_processor.check_in(REGULAR_EVENT_ID, "m1", now=T0 + timedelta(seconds=i)),
                range(200),
            )
        )

    assert repo.insert_count == 1
    assert len({r.record.attendance_id for r in results}) == 1
