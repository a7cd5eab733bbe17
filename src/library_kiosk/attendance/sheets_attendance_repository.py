from __future__ import annotations

from datetime import date, datetime, time
from typing import Callable, Optional, Sequence

from ..common.datetime_utils import format_clock_time, parse_clock_time, parse_iso_date, parse_utc_iso, to_utc_iso
from ..sheets.ids import generate_record_id
from ..students.sheets_student_repository import RowTable, student_from_row, utc_now
from .model import AttendanceEntry, AttendanceRecord, decode_purposes, encode_purposes
from .repository import AttendanceRepository


def _parse_time(value: str) -> time:
    try:
        return parse_clock_time(value or "")
    except ValueError:
        return time(0, 0)


def _entry_from_row(row: dict[str, str]) -> Optional[AttendanceEntry]:
    try:
        entry_id = int(row.get("id") or "")
        student_id = int(row.get("studentId") or "")
        attendance_date = parse_iso_date(row.get("attendanceDate") or "")
    except ValueError:
        return None
    return AttendanceEntry(
        entry_id=entry_id,
        student_id=student_id,
        attendance_date=attendance_date,
        attendance_time=_parse_time(row.get("attendanceTime") or ""),
        purposes=decode_purposes(row.get("purposes")),
        created_at=parse_utc_iso(row.get("createdAt") or ""),
        updated_at=parse_utc_iso(row.get("updatedAt") or ""),
    )


class SheetsAttendanceRepository(AttendanceRepository):
    """Attendance sheet.

    Each write reads the whole sheet, changes it in memory and writes it
    back. Two kiosks writing at the same moment can lose one update (last
    writer wins); the deployment assumes a single kiosk at a time.
    """

    def __init__(
        self,
        attendance: RowTable,
        students: RowTable,
        *,
        clock: Callable[[], datetime] = utc_now,
    ):
        self._attendance = attendance
        self._students = students
        self._clock = clock

    def find_today_entry(self, student_id: int, today: date) -> Optional[AttendanceEntry]:
        student_key, date_key = str(student_id), today.isoformat()
        for row in self._attendance.read():
            if row.get("studentId") == student_key and row.get("attendanceDate") == date_key:
                return _entry_from_row(row)
        return None

    def upsert_entry(
        self,
        *,
        student_id: int,
        attendance_date: date,
        attendance_time: time,
        purposes: tuple[str, ...],
    ) -> None:
        rows = self._attendance.read()
        student_key, date_key = str(student_id), attendance_date.isoformat()
        timestamp = to_utc_iso(self._clock())

        existing = next(
            (r for r in rows if r.get("studentId") == student_key and r.get("attendanceDate") == date_key),
            None,
        )
        if existing is not None:
            existing["attendanceTime"] = format_clock_time(attendance_time)
            existing["purposes"] = encode_purposes(purposes)
            existing["updatedAt"] = timestamp
        else:
            existing_ids = {r["id"] for r in rows if r.get("id")}
            rows.append(
                {
                    "id": str(generate_record_id(existing_ids)),
                    "studentId": student_key,
                    "attendanceDate": date_key,
                    "attendanceTime": format_clock_time(attendance_time),
                    "purposes": encode_purposes(purposes),
                    "createdAt": timestamp,
                    "updatedAt": timestamp,
                }
            )
        self._attendance.write(rows)

    def delete_entry(self, entry_id: int) -> None:
        rows = self._attendance.read()
        target = str(entry_id)
        remaining = [r for r in rows if r.get("id") != target]
        if len(remaining) != len(rows):
            self._attendance.write(remaining)

    def list_entries(
        self,
        *,
        start_date: date,
        end_date: date,
        search: Optional[str] = None,
    ) -> Sequence[AttendanceRecord]:
        students = {s.student_id: s for s in (student_from_row(r) for r in self._students.read()) if s is not None}

        records: list[AttendanceRecord] = []
        for row in self._attendance.read():
            entry = _entry_from_row(row)
            if entry is None or not (start_date <= entry.attendance_date <= end_date):
                continue
            student = students.get(entry.student_id)
            if student is None:
                continue
            record = AttendanceRecord(
                entry_id=entry.entry_id,
                student_id=student.student_id,
                student_code=student.student_code,
                attendance_date=entry.attendance_date,
                attendance_time=entry.attendance_time,
                purposes=entry.purposes,
                class_level=student.class_level,
                room=student.room,
                title=student.title,
                number=student.number,
                first_name=student.first_name,
                last_name=student.last_name,
            )
            if record.matches(search):
                records.append(record)

        records.sort(key=lambda r: (r.attendance_date, r.attendance_time), reverse=True)
        return records
