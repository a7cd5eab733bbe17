from __future__ import annotations

from typing import Any, Iterable, Optional

from ..core import messages
from ..core.exceptions import ValidationError


def require_non_empty(value: Optional[str], message: str) -> str:
    if value is None or not str(value).strip():
        raise ValidationError(message)
    return str(value).strip()


def normalize_purposes(purposes: Iterable[Any]) -> tuple[str, ...]:
    """Trim, drop blanks and collapse duplicates keeping first-seen order."""

    seen: dict[str, None] = {}
    for purpose in purposes or ():
        if purpose is None:
            continue
        trimmed = str(purpose).strip()
        if trimmed:
            seen.setdefault(trimmed, None)
    return tuple(seen)


def merge_purposes(existing: Iterable[str], new: Iterable[str]) -> tuple[str, ...]:
    """Union of two purpose lists: existing order first, then unseen new ones."""

    return normalize_purposes([*existing, *new])


def parse_positive_int(value: Any, message: str = messages.INVALID_ID) -> int:
    if isinstance(value, bool):
        raise ValidationError(message)
    try:
        number = int(str(value).strip())
    except (TypeError, ValueError):
        raise ValidationError(message) from None
    if number <= 0:
        raise ValidationError(message)
    return number


def blank_to_none(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None
