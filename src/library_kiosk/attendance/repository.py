from __future__ import annotations

from datetime import date, time
from typing import Optional, Protocol, Sequence

from .model import AttendanceEntry, AttendanceRecord


class AttendanceRepository(Protocol):
    def find_today_entry(self, student_id: int, today: date) -> Optional[AttendanceEntry]:
        raise NotImplementedError

    def upsert_entry(
        self,
        *,
        student_id: int,
        attendance_date: date,
        attendance_time: time,
        purposes: tuple[str, ...],
    ) -> None:
        """Insert the (student, date) entry or overwrite its time and purposes."""

        raise NotImplementedError

    def delete_entry(self, entry_id: int) -> None:
        """Delete by id; a missing id is a no-op."""

        raise NotImplementedError

    def list_entries(
        self,
        *,
        start_date: date,
        end_date: date,
        search: Optional[str] = None,
    ) -> Sequence[AttendanceRecord]:
        raise NotImplementedError
