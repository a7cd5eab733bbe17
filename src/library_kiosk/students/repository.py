from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import ClassRoom, Student, StudentImportRow, StudentPage, StudentQuery


class StudentRepository(Protocol):
    """Repository interface for the student directory.

    Note (DIP): services depend on this interface, never on MySQL or Sheets
    directly. Inputs arrive already normalized by ``StudentDirectory``.
    """

    def find_by_code(self, student_code: str) -> Optional[Student]:
        raise NotImplementedError

    def list_students(self, query: StudentQuery) -> StudentPage:
        raise NotImplementedError

    def upsert_students(self, rows: Sequence[StudentImportRow]) -> int:
        raise NotImplementedError

    def delete_by_codes(self, codes: Sequence[str]) -> int:
        """Delete students and, with them, their attendance entries."""

        raise NotImplementedError

    def list_codes(self) -> list[str]:
        raise NotImplementedError

    def list_class_rooms(self) -> list[ClassRoom]:
        raise NotImplementedError
