from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Iterable, Sequence

from ..common.datetime_utils import now_local
from ..common.validators import clean_member_ids
from ..core.exceptions import NotFoundError
from ..events.repository import EventRepository
from .model import Participant, RosterChange
from .repository import ParticipantRepository

logger = logging.getLogger(__name__)


class ParticipantRoster:
    def __init__(
        self,
        participants: ParticipantRepository,
        events: EventRepository,
        *,
        clock: Callable[[], datetime] = now_local,
    ):
        self._participants = participants
        self._events = events
        self._clock = clock

    def _require_event(self, event_id: int) -> None:
        if not self._events.get_by_id(int(event_id)):
            raise NotFoundError("이벤트를 찾을 수 없습니다")

    def add(self, event_id: int, member_ids: Iterable[str]) -> RosterChange:
        self._require_event(event_id)
        ids = clean_member_ids(member_ids)
        added = self._participants.add_many(event_id=int(event_id), member_ids=ids, added_at=self._clock())
        logger.info("Roster of event %s: %d added, %d already enrolled", event_id, added, len(ids) - added)
        return RosterChange(added=added, already_exists=len(ids) - added)

    def remove(self, event_id: int, member_ids: Iterable[str]) -> RosterChange:
        self._require_event(event_id)
        ids = clean_member_ids(member_ids)
        removed = self._participants.remove_many(event_id=int(event_id), member_ids=ids)
        logger.info("Roster of event %s: %d removed", event_id, removed)
        return RosterChange(removed=removed)

    def list(self, event_id: int) -> Sequence[Participant]:
        self._require_event(event_id)
        return self._participants.list_for_event(int(event_id))
