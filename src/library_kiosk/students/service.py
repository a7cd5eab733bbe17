from __future__ import annotations

from typing import Iterable, Optional

from ..common.logging_utils import get_logger
from .model import ClassRoom, Student, StudentImportRow, StudentPage, StudentQuery
from .repository import StudentRepository

logger = get_logger(__name__)


class StudentDirectory:
    """Use case: look up and maintain the student roster."""

    def __init__(self, students: StudentRepository):
        self._students = students

    def find_by_code(self, student_code: Optional[str]) -> Optional[Student]:
        trimmed = (student_code or "").strip()
        if not trimmed:
            return None
        return self._students.find_by_code(trimmed)

    def list_students(
        self,
        *,
        search: Optional[str] = None,
        class_level: Optional[str] = None,
        room: Optional[str] = None,
        page: Optional[int] = 1,
        limit: Optional[int] = None,
    ) -> StudentPage:
        query = StudentQuery(search=search, class_level=class_level, room=room, page=page, limit=limit).clamped()
        return self._students.list_students(query)

    def bulk_upsert(self, rows: Iterable[StudentImportRow]) -> int:
        normalized = [r for r in (row.normalized() for row in rows) if r is not None]
        if not normalized:
            return 0
        processed = self._students.upsert_students(normalized)
        logger.info("Upserted %d student rows", processed)
        return processed

    def delete_by_codes(self, codes: Iterable[str]) -> int:
        normalized = list(dict.fromkeys(c.strip() for c in codes if c and c.strip()))
        if not normalized:
            return 0
        removed = self._students.delete_by_codes(normalized)
        logger.info("Deleted %d students (requested %d codes)", removed, len(normalized))
        return removed

    def list_codes(self) -> list[str]:
        return self._students.list_codes()

    def list_class_rooms(self) -> list[ClassRoom]:
        return self._students.list_class_rooms()
