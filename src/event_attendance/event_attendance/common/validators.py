from __future__ import annotations

from typing import Iterable

from ..core.exceptions import ValidationError


def require_non_empty(value: str, field_name: str) -> str:
    if value is not None and not isinstance(value, str):
        raise ValidationError(f"{field_name}은(는) 문자열이어야 합니다")
    if not value or not value.strip():
        raise ValidationError(f"{field_name}을(를) 입력해 주세요")
    return value.strip()


def clean_member_ids(member_ids: Iterable[str]) -> list[str]:
    """Strip ids and drop duplicates, keeping first-seen order."""

    if member_ids is None or isinstance(member_ids, str):
        raise ValidationError("member_ids는 목록이어야 합니다")

    out: list[str] = []
    seen: set[str] = set()
    for raw in member_ids:
        member_id = require_non_empty(str(raw) if raw is not None else "", "멤버 ID")
        if member_id in seen:
            continue
        seen.add(member_id)
        out.append(member_id)
    return out
