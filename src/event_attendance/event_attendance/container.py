from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from functools import partial
from typing import Callable, Optional

from .attendance.factory import CheckInStrategyFactory
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.override_service import AttendanceOverrideService
from .attendance.query_service import AttendanceQueryService
from .attendance.repository import AttendanceRepository
from .attendance.service import CheckInProcessor
from .codes.mysql_code_repository import MySQLAttendanceCodeRepository
from .codes.repository import AttendanceCodeRepository
from .codes.service import AttendanceCodeManager, random_code
from .common.datetime_utils import now_local
from .core.constants import ATTENDANCE_CODE_LENGTH, DEFAULT_LATE_THRESHOLD_MINUTES
from .database.connection import DBConfig, DatabaseConnection
from .events.mysql_event_repository import MySQLEventRepository
from .events.repository import EventRepository
from .events.window import EventWindowResolver
from .participants.mysql_participant_repository import MySQLParticipantRepository
from .participants.repository import ParticipantRepository
from .participants.service import ParticipantRoster


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    events_repo: EventRepository
    codes_repo: AttendanceCodeRepository
    participants_repo: ParticipantRepository
    attendance_repo: AttendanceRepository

    window_resolver: EventWindowResolver
    code_manager: AttendanceCodeManager
    participant_roster: ParticipantRoster
    checkin_processor: CheckInProcessor
    override_service: AttendanceOverrideService
    query_service: AttendanceQueryService


def assemble(
    *,
    events_repo: EventRepository,
    codes_repo: AttendanceCodeRepository,
    participants_repo: ParticipantRepository,
    attendance_repo: AttendanceRepository,
    conn: Optional[DatabaseConnection] = None,
    default_late_threshold_minutes: int = DEFAULT_LATE_THRESHOLD_MINUTES,
    attendance_code_length: int = ATTENDANCE_CODE_LENGTH,
    clock: Callable[[], datetime] = now_local,
) -> Container:
    """Wire services over any set of repositories (MySQL in the app, fakes in tests)."""

    window_resolver = EventWindowResolver(default_late_threshold_minutes=default_late_threshold_minutes)
    code_manager = AttendanceCodeManager(
        codes_repo,
        events_repo,
        code_factory=partial(random_code, attendance_code_length),
        clock=clock,
    )
    participant_roster = ParticipantRoster(participants_repo, events_repo, clock=clock)
    checkin_processor = CheckInProcessor(
        attendance_repo,
        events_repo,
        code_manager,
        resolver=window_resolver,
        strategy_factory=CheckInStrategyFactory(resolver=window_resolver),
        clock=clock,
    )
    override_service = AttendanceOverrideService(attendance_repo, events_repo, clock=clock)
    query_service = AttendanceQueryService(attendance_repo, participants_repo, events_repo)

    return Container(
        conn=conn,
        events_repo=events_repo,
        codes_repo=codes_repo,
        participants_repo=participants_repo,
        attendance_repo=attendance_repo,
        window_resolver=window_resolver,
        code_manager=code_manager,
        participant_roster=participant_roster,
        checkin_processor=checkin_processor,
        override_service=override_service,
        query_service=query_service,
    )


def build_container(
    *,
    db_config: dict,
    default_late_threshold_minutes: int = DEFAULT_LATE_THRESHOLD_MINUTES,
    attendance_code_length: int = ATTENDANCE_CODE_LENGTH,
) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    return assemble(
        events_repo=MySQLEventRepository(conn),
        codes_repo=MySQLAttendanceCodeRepository(conn),
        participants_repo=MySQLParticipantRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        conn=conn,
        default_late_threshold_minutes=default_late_threshold_minutes,
        attendance_code_length=attendance_code_length,
    )
