from __future__ import annotations

from datetime import datetime
from typing import Protocol, Sequence

from .model import Participant


class ParticipantRepository(Protocol):
    def list_for_event(self, event_id: int) -> Sequence[Participant]:
        raise NotImplementedError

    def add_many(self, *, event_id: int, member_ids: Sequence[str], added_at: datetime) -> int:
        """Insert missing memberships; existing ones are left alone.

        Returns the number of rows actually inserted.
        """

        raise NotImplementedError

    def remove_many(self, *, event_id: int, member_ids: Sequence[str]) -> int:
        """Returns the number of rows actually deleted."""

        raise NotImplementedError
