from __future__ import annotations

from datetime import datetime
from typing import Optional

from ..core.exceptions import ValidationError


def parse_iso_datetime(value: Optional[str]) -> Optional[datetime]:
    """Parse an ISO 8601 string (as sent by the web client) into a naive datetime.

    Empty values return None. Offsets are dropped after conversion to local time
    so values compare against the server clock.
    """

    if value is not None and not isinstance(value, str):
        raise ValidationError("날짜/시간은 ISO 8601 문자열이어야 합니다")
    v = (value or "").strip()
    if not v:
        return None
    if v.endswith("Z"):
        v = v[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(v)
    except ValueError:
        raise ValidationError("날짜/시간 형식이 올바르지 않습니다 (ISO 8601)")
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()
