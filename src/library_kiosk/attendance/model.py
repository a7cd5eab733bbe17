from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import date, datetime, time
from typing import Any, Optional

from ..common.datetime_utils import format_clock_time


@dataclass(frozen=True)
class AttendanceEntry:
    """Domain entity: one library visit row per student per day."""

    entry_id: int
    student_id: int
    attendance_date: date
    attendance_time: time
    purposes: tuple[str, ...]
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass(frozen=True)
class AttendanceRecord:
    """Read-model for listings: entry joined with the owning student."""

    entry_id: int
    student_id: int
    student_code: str
    attendance_date: date
    attendance_time: time
    purposes: tuple[str, ...]
    class_level: str
    room: Optional[str]
    title: Optional[str]
    number: Optional[str]
    first_name: str
    last_name: str

    def matches(self, search: Optional[str]) -> bool:
        term = (search or "").strip().casefold()
        if not term:
            return True
        return (
            term in self.student_code.casefold()
            or term in self.first_name.casefold()
            or term in self.last_name.casefold()
        )

    def to_dict(self) -> dict:
        return {
            "id": self.entry_id,
            "studentId": self.student_id,
            "studentCode": self.student_code,
            "attendanceDate": self.attendance_date.strftime("%Y-%m-%d"),
            "attendanceTime": format_clock_time(self.attendance_time),
            "purposes": list(self.purposes),
            "classLevel": self.class_level,
            "room": self.room,
            "title": self.title,
            "number": self.number,
            "firstName": self.first_name,
            "lastName": self.last_name,
        }


@dataclass(frozen=True)
class AttendanceStats:
    total_records: int = 0
    unique_students: int = 0
    purpose_counts: dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "totalRecords": self.total_records,
            "uniqueStudents": self.unique_students,
            "purposeCounts": dict(self.purpose_counts),
        }


@dataclass(frozen=True)
class AttendanceListing:
    records: list[AttendanceRecord]
    stats: AttendanceStats

    def to_dict(self) -> dict:
        return {"records": [r.to_dict() for r in self.records], "stats": self.stats.to_dict()}


def encode_purposes(purposes: tuple[str, ...]) -> str:
    """Purposes are persisted as a JSON array text blob on both backends."""

    return json.dumps(list(purposes), ensure_ascii=False)


def decode_purposes(value: Any) -> tuple[str, ...]:
    """Read a stored purpose list, tolerating legacy plain-text values."""

    if value is None:
        return ()
    if isinstance(value, (bytes, bytearray)):
        value = value.decode("utf-8")
    if isinstance(value, (list, tuple)):
        items = value
    elif isinstance(value, str):
        if not value.strip():
            return ()
        try:
            parsed = json.loads(value)
        except ValueError:
            return (value,)
        if not isinstance(parsed, list):
            return (value,)
        items = parsed
    else:
        return ()
    return tuple(str(item) for item in items if item is not None and str(item))
