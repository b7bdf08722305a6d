from __future__ import annotations

import pytest

from src.event_attendance.event_attendance.container import assemble
from tests.fakes import (
    CODE_EVENT_ID,
    REGULAR_EVENT_ID,
    UNTRACKED_EVENT_ID,
    InMemoryAttendance,
    InMemoryCodes,
    InMemoryEvents,
    InMemoryParticipants,
    make_event,
)


@pytest.fixture()
def events():
    return InMemoryEvents(
        make_event(REGULAR_EVENT_ID),
        make_event(CODE_EVENT_ID, is_attendance_code_required=True),
        make_event(UNTRACKED_EVENT_ID, is_attendance_required=False),
    )


@pytest.fixture()
def attendance_repo():
    return InMemoryAttendance()


@pytest.fixture()
def participants_repo():
    return InMemoryParticipants()


@pytest.fixture()
def codes_repo():
    return InMemoryCodes()


@pytest.fixture()
def container(events, attendance_repo, participants_repo, codes_repo):
    return assemble(
        events_repo=events,
        codes_repo=codes_repo,
        participants_repo=participants_repo,
        attendance_repo=attendance_repo,
    )
