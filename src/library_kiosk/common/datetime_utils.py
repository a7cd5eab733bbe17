from __future__ import annotations

import calendar
import re
from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from ..core.exceptions import ConfigurationError

_MONTH_PATTERN = re.compile(r"^\d{4}-\d{2}$")


@dataclass(frozen=True)
class MonthRange:
    start: date
    end: date

    def contains(self, value: date) -> bool:
        return self.start <= value <= self.end


def resolve_timezone(timezone_name: str) -> ZoneInfo:
    try:
        return ZoneInfo((timezone_name or "").strip())
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise ConfigurationError(f"LIBRARY_TIMEZONE is not a known timezone: {timezone_name!r}") from exc


def now_in(timezone_name: str) -> datetime:
    """Current wall-clock time in the library's timezone.

    Note: Wrapped so tests can patch/mock easier.
    """
    return datetime.now(ZoneInfo(timezone_name))


def resolve_month_range(month: Optional[str], *, today: date) -> MonthRange:
    """First and last day of ``month`` ("YYYY-MM").

    Missing or malformed values fall back to the month of ``today``; a month
    number outside 1..12 is clamped.
    """

    year, month_number = today.year, today.month
    if month and _MONTH_PATTERN.match(month.strip()):
        raw_year, raw_month = month.strip().split("-")
        year = int(raw_year)
        month_number = min(max(int(raw_month), 1), 12)
        if year < 1:
            year, month_number = today.year, today.month

    last_day = calendar.monthrange(year, month_number)[1]
    return MonthRange(start=date(year, month_number, 1), end=date(year, month_number, last_day))


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value.strip(), "%Y-%m-%d").date()


def parse_clock_time(value: str) -> time:
    """Parse HH:MM or HH:MM:SS."""
    parts = value.strip().split(":")
    if len(parts) < 2:
        raise ValueError(f"Invalid time string: {value!r}")
    hours = int(parts[0])
    minutes = int(parts[1])
    seconds = int(parts[2]) if len(parts) >= 3 and parts[2] else 0
    return time(hour=hours, minute=minutes, second=seconds)


def format_clock_time(value: time) -> str:
    return value.strftime("%H:%M")


def to_utc_iso(value: Optional[datetime]) -> Optional[str]:
    if value is None:
        return None
    if value.tzinfo is not None:
        value = value.astimezone(ZoneInfo("UTC")).replace(tzinfo=None)
    return value.strftime("%Y-%m-%dT%H:%M:%SZ")


def parse_utc_iso(value: str) -> Optional[datetime]:
    text = (value or "").strip()
    if not text:
        return None
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(ZoneInfo("UTC")).replace(tzinfo=None)
    return parsed
