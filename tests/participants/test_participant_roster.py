from __future__ import annotations

import pytest

from src.event_attendance.event_attendance.core.exceptions import NotFoundError, ValidationError
from tests.fakes import REGULAR_EVENT_ID


def test_add_counts_new_and_existing(container):
    roster = container.participant_roster

    first = roster.add(REGULAR_EVENT_ID, ["m1", "m2"])
    second = roster.add(REGULAR_EVENT_ID, ["m2", " m3 ", "m3"])

    assert (first.added, first.already_exists) == (2, 0)
    assert (second.added, second.already_exists) == (1, 1)
    assert [p.member_id for p in roster.list(REGULAR_EVENT_ID)] == ["m1", "m2", "m3"]


def test_remove_counts_only_enrolled(container):
    roster = container.participant_roster
    roster.add(REGULAR_EVENT_ID, ["m1", "m2"])

    change = roster.remove(REGULAR_EVENT_ID, ["m1", "ghost"])

    assert change.removed == 1
    assert [p.member_id for p in roster.list(REGULAR_EVENT_ID)] == ["m2"]


def test_invalid_member_ids(container):
    roster = container.participant_roster

    with pytest.raises(ValidationError):
        roster.add(REGULAR_EVENT_ID, ["m1", "  "])
    with pytest.raises(ValidationError):
        roster.add(REGULAR_EVENT_ID, "m1")
    with pytest.raises(ValidationError):
        roster.add(REGULAR_EVENT_ID, None)
    assert roster.list(REGULAR_EVENT_ID) == []


def test_unknown_event(container):
    with pytest.raises(NotFoundError):
        container.participant_roster.add(999, ["m1"])
    with pytest.raises(NotFoundError):
        container.participant_roster.remove(999, ["m1"])
    with pytest.raises(NotFoundError):
        container.participant_roster.list(999)
