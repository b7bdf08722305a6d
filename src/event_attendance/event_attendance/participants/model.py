from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class Participant:
    """Roster enrollment. Says nothing about whether the member attended."""

    event_id: int
    member_id: str
    added_at: Optional[datetime] = None


@dataclass(frozen=True)
class RosterChange:
    added: int = 0
    already_exists: int = 0
    removed: int = 0
