from __future__ import annotations

import itertools
import threading
from concurrent.futures import ThreadPoolExecutor
from datetime import timedelta

import pytest

from src.event_attendance.event_attendance.codes.service import AttendanceCodeManager, random_code
from src.event_attendance.event_attendance.core.constants import ATTENDANCE_CODE_ALPHABET
from src.event_attendance.event_attendance.core.exceptions import NotFoundError
from tests.fakes import CODE_EVENT_ID, REGULAR_EVENT_ID, T0


@pytest.fixture()
def manager(codes_repo, events):
    sequence = itertools.count(1)
    return AttendanceCodeManager(
        codes_repo,
        events,
        code_factory=lambda: f"CODE{next(sequence):02d}",
        clock=lambda: T0 - timedelta(minutes=10),
    )


def test_random_code_uses_alphabet():
    code = random_code(8)

    assert len(code) == 8
    assert set(code) <= set(ATTENDANCE_CODE_ALPHABET)


def test_generate_replaces_previous_code(manager):
    first = manager.generate(CODE_EVENT_ID)
    second = manager.generate(CODE_EVENT_ID)

    assert first.code == "CODE01"
    assert second.code == "CODE02"
    assert second.created_at == T0 - timedelta(minutes=10)
    assert manager.get_active(CODE_EVENT_ID).code == "CODE02"
    assert not manager.validate(CODE_EVENT_ID, "CODE01")
    assert manager.validate(CODE_EVENT_ID, " CODE02 ")


def test_generate_for_event_without_codes_is_not_found(manager):
    with pytest.raises(NotFoundError):
        manager.generate(REGULAR_EVENT_ID)
    with pytest.raises(NotFoundError):
        manager.generate(999)


def test_get_active_without_code_is_not_found(manager):
    with pytest.raises(NotFoundError):
        manager.get_active(CODE_EVENT_ID)


def test_revoke_is_idempotent(manager):
    manager.generate(CODE_EVENT_ID)

    manager.revoke(CODE_EVENT_ID)
    manager.revoke(CODE_EVENT_ID)

    assert not manager.has_active(CODE_EVENT_ID)
    assert not manager.validate(CODE_EVENT_ID, "CODE01")


def test_validate_is_case_sensitive_and_rejects_blank(manager):
    manager.generate(CODE_EVENT_ID)

    assert not manager.validate(CODE_EVENT_ID, "code01")
    assert not manager.validate(CODE_EVENT_ID, "")
    assert not manager.validate(CODE_EVENT_ID, None)


def test_check(manager):
    assert manager.check(REGULAR_EVENT_ID, None).is_valid is True
    assert manager.check(CODE_EVENT_ID, "CODE01").is_valid is False

    manager.generate(CODE_EVENT_ID)
    assert manager.check(CODE_EVENT_ID, "CODE01").is_valid is True
    assert manager.check(CODE_EVENT_ID, "WRONG").is_valid is False

    with pytest.raises(NotFoundError):
        manager.check(999, "CODE01")


def test_render_qr_png(manager):
    manager.generate(CODE_EVENT_ID)

    png = manager.render_qr_png(CODE_EVENT_ID)

    assert png.startswith(b"\x89PNG\r\n\x1a\n")


def test_render_qr_without_code_is_not_found(manager):
    with pytest.raises(NotFoundError):
        manager.render_qr_png(CODE_EVENT_ID)


def test_concurrent_generate_leaves_one_live_code(codes_repo, events):
    sequence = itertools.count(1)
    lock = threading.Lock()

    def next_code():
        with lock:
            return f"C{next(sequence):05d}"

    manager = AttendanceCodeManager(codes_repo, events, code_factory=next_code, clock=lambda: T0)

    with ThreadPoolExecutor(max_workers=16) as pool:
        issued = list(pool.map(lambda _: manager.generate(CODE_EVENT_ID), range(64)))

    active = manager.get_active(CODE_EVENT_ID)
    assert len({c.code for c in issued}) == 64
    assert active.code in {c.code for c in issued}
    assert sum(1 for c in issued if manager.validate(CODE_EVENT_ID, c.code)) == 1


def test_concurrent_generate_and_revoke_never_leave_stale_code(manager):
    def work(i):
        if i % 2:
            manager.revoke(CODE_EVENT_ID)
            return None
        return manager.generate(CODE_EVENT_ID).code

    with ThreadPoolExecutor(max_workers=8) as pool:
        issued = [c for c in pool.map(work, range(40)) if c]

    if manager.has_active(CODE_EVENT_ID):
        active = manager.get_active(CODE_EVENT_ID).code
        assert active in issued
        assert [c for c in issued if manager.validate(CODE_EVENT_ID, c)] == [active]

    manager.revoke(CODE_EVENT_ID)
    assert not manager.has_active(CODE_EVENT_ID)
