from __future__ import annotations

from datetime import datetime
from typing import Optional

import pytest

from library_kiosk.attendance.service import AttendanceService
from library_kiosk.attendance.sheets_attendance_repository import SheetsAttendanceRepository
from library_kiosk.core.enums import StoreBackend
from library_kiosk.store.base import RecordStore
from library_kiosk.students.service import StudentDirectory
from library_kiosk.students.sheets_student_repository import SheetsStudentRepository

FIXED_UTC = datetime(2024, 2, 1, 3, 0, 0)


class MemoryTable:
    """Stands in for one worksheet: whole-table read and replace."""

    def __init__(self, rows: Optional[list[dict]] = None):
        self.rows = [dict(r) for r in rows or []]
        self.writes = 0

    def read(self) -> list[dict[str, str]]:
        return [dict(r) for r in self.rows]

    def write(self, rows: list[dict]) -> None:
        self.rows = [dict(r) for r in rows]
        self.writes += 1


def student_row(student_id: int, code: str, first: str, last: str, class_level: str = "ม.1", room: str = "1", number: str = "") -> dict:
    return {
        "id": str(student_id),
        "studentCode": code,
        "classLevel": class_level,
        "room": room,
        "number": number,
        "title": "",
        "firstName": first,
        "lastName": last,
        "createdAt": "2024-01-01T00:00:00Z",
        "updatedAt": "2024-01-01T00:00:00Z",
    }


DEFAULT_STUDENTS = [
    student_row(1, "19311", "Somchai", "Jaidee", number="1"),
    student_row(2, "19312", "Suda", "Rakdee", number="2"),
    student_row(3, "20001", "Anan", "Meesuk", class_level="ม.2", room="", number="10"),
]


@pytest.fixture
def students_table() -> MemoryTable:
    return MemoryTable(DEFAULT_STUDENTS)


@pytest.fixture
def attendance_table() -> MemoryTable:
    return MemoryTable()


@pytest.fixture
def student_repo(students_table, attendance_table) -> SheetsStudentRepository:
    return SheetsStudentRepository(students_table, attendance_table, clock=lambda: FIXED_UTC)


@pytest.fixture
def attendance_repo(students_table, attendance_table) -> SheetsAttendanceRepository:
    return SheetsAttendanceRepository(attendance_table, students_table, clock=lambda: FIXED_UTC)


@pytest.fixture
def directory(student_repo) -> StudentDirectory:
    return StudentDirectory(student_repo)


@pytest.fixture
def attendance_service(attendance_repo, directory) -> AttendanceService:
    return AttendanceService(attendance_repo, directory, timezone_name="Asia/Bangkok")


@pytest.fixture
def memory_store(student_repo, attendance_repo) -> RecordStore:
    return RecordStore(
        backend=StoreBackend.SHEETS,
        students=student_repo,
        attendance=attendance_repo,
        health_check=student_repo.ping,
    )


@pytest.fixture
def make_student_row():
    return student_row
