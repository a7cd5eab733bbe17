"""Sort keys used when ordering students in Python (spreadsheet backend)."""

from __future__ import annotations

import re
import unicodedata
from typing import Optional

_DIGITS = re.compile(r"(\d+)")
_NUMBER = re.compile(r"\d+(\.\d+)?")


def text_key(value: Optional[str]) -> tuple:
    """Case and accent insensitive key with numeric runs compared as numbers."""

    text = unicodedata.normalize("NFKD", (value or "").strip()).casefold()
    text = "".join(ch for ch in text if not unicodedata.combining(ch))
    parts = _DIGITS.split(text)
    return tuple((0, int(part), "") if part.isdecimal() else (1, 0, part) for part in parts if part != "")


def blank_first_key(value: Optional[str]) -> tuple:
    """Blank values sort before any non-blank value."""

    text = (value or "").strip()
    return (1 if text else 0, text_key(text))


def student_number_key(value: Optional[str]) -> tuple:
    text = (value or "").strip()
    if _NUMBER.fullmatch(text):
        return (0, float(text), ())
    return (1, 0.0, blank_first_key(text))
