from __future__ import annotations

from datetime import datetime, timezone
from typing import Callable, Optional, Protocol, Sequence

from ..common.collation import blank_first_key, student_number_key, text_key
from ..common.datetime_utils import parse_utc_iso, to_utc_iso
from ..common.validators import blank_to_none
from ..sheets.ids import generate_record_id
from .model import ClassRoom, Student, StudentImportRow, StudentPage, StudentQuery
from .repository import StudentRepository


class RowTable(Protocol):
    def read(self) -> list[dict[str, str]]:
        ...

    def write(self, rows: list[dict]) -> None:
        ...


def _row_code(row: dict) -> str:
    return (row.get("studentCode") or "").strip()


def utc_now() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def student_from_row(row: dict[str, str]) -> Optional[Student]:
    """Sheet row -> Student, or None for rows that cannot be used."""

    code = _row_code(row)
    first_name = (row.get("firstName") or "").strip()
    last_name = (row.get("lastName") or "").strip()
    try:
        student_id = int(str(row.get("id") or "").strip())
    except ValueError:
        return None
    if not code or not first_name or not last_name:
        return None

    created_at = parse_utc_iso(row.get("createdAt") or "") or parse_utc_iso(row.get("updatedAt") or "")
    updated_at = parse_utc_iso(row.get("updatedAt") or "") or created_at
    return Student(
        student_id=student_id,
        student_code=code,
        class_level=(row.get("classLevel") or "").strip() or "-",
        room=blank_to_none(row.get("room")),
        number=blank_to_none(row.get("number")),
        title=blank_to_none(row.get("title")),
        first_name=first_name,
        last_name=last_name,
        created_at=created_at,
        updated_at=updated_at,
    )


def _sort_key(s: Student) -> tuple:
    return (
        text_key(s.class_level),
        blank_first_key(s.room),
        student_number_key(s.number),
        text_key(s.first_name),
        text_key(s.last_name),
    )


def _matches(s: Student, query: StudentQuery) -> bool:
    if query.class_level:
        if s.class_level != query.class_level:
            return False
        if query.room is not None:
            if query.room and (s.room or "") != query.room:
                return False
            if not query.room and s.room:
                return False

    term = (query.search or "").casefold()
    if term:
        return (
            term in s.student_code.casefold()
            or term in s.first_name.casefold()
            or term in s.last_name.casefold()
        )
    return True


class SheetsStudentRepository(StudentRepository):
    """Students sheet. Every write rewrites the whole sheet."""

    def __init__(
        self,
        students: RowTable,
        attendance: RowTable,
        *,
        clock: Callable[[], datetime] = utc_now,
    ):
        self._students = students
        self._attendance = attendance
        self._clock = clock

    def all_students(self) -> list[Student]:
        return [s for s in (student_from_row(r) for r in self._students.read()) if s is not None]

    def find_by_code(self, student_code: str) -> Optional[Student]:
        for s in self.all_students():
            if s.student_code == student_code:
                return s
        return None

    def list_students(self, query: StudentQuery) -> StudentPage:
        filtered = [s for s in self.all_students() if _matches(s, query)]
        filtered.sort(key=_sort_key)
        return StudentPage(
            students=filtered[query.offset : query.offset + query.limit],
            total=len(filtered),
        )

    def upsert_students(self, rows: Sequence[StudentImportRow]) -> int:
        if not rows:
            return 0

        existing_rows = self._students.read()
        existing_ids = {r["id"] for r in existing_rows if r.get("id")}
        by_code = {_row_code(r): r for r in existing_rows}
        timestamp = to_utc_iso(self._clock())

        for row in rows:
            fields = {
                "classLevel": row.class_level,
                "room": row.room or "",
                "number": row.number or "",
                "title": row.title or "",
                "firstName": row.first_name,
                "lastName": row.last_name,
                "updatedAt": timestamp,
            }
            current = by_code.get(row.student_code)
            if current is not None:
                current.update(fields, studentCode=row.student_code)
                continue

            new_id = str(generate_record_id(existing_ids))
            existing_ids.add(new_id)
            new_row = {"id": new_id, "studentCode": row.student_code, "createdAt": timestamp, **fields}
            existing_rows.append(new_row)
            by_code[row.student_code] = new_row

        self._students.write(existing_rows)
        return len(rows)

    def delete_by_codes(self, codes: Sequence[str]) -> int:
        code_set = set(codes)
        if not code_set:
            return 0

        student_rows = self._students.read()
        removed = [r for r in student_rows if _row_code(r) in code_set]
        if not removed:
            return 0

        self._students.write([r for r in student_rows if _row_code(r) not in code_set])

        # No foreign keys in a spreadsheet: cascade by hand.
        removed_ids = {r.get("id") for r in removed if r.get("id")}
        if removed_ids:
            attendance_rows = self._attendance.read()
            remaining = [r for r in attendance_rows if r.get("studentId") not in removed_ids]
            if len(remaining) != len(attendance_rows):
                self._attendance.write(remaining)
        return len(removed)

    def list_codes(self) -> list[str]:
        codes = {_row_code(r) for r in self._students.read()}
        return sorted((c for c in codes if c), key=text_key)

    def list_class_rooms(self) -> list[ClassRoom]:
        combos: dict[tuple[str, str], ClassRoom] = {}
        for s in self.all_students():
            combos.setdefault((s.class_level, s.room or ""), ClassRoom(class_level=s.class_level, room=s.room))
        return sorted(combos.values(), key=lambda c: (text_key(c.class_level), blank_first_key(c.room)))

    def ping(self) -> None:
        self._students.read()
