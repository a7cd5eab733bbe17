from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Mapping, Optional

from ..common.datetime_utils import to_utc_iso
from ..common.validators import blank_to_none
from ..core.constants import DEFAULT_STUDENT_PAGE_SIZE, MAX_STUDENT_PAGE_SIZE


@dataclass(frozen=True)
class Student:
    """Domain entity: a student in the library directory."""

    student_id: int
    student_code: str
    class_level: str
    room: Optional[str]
    number: Optional[str]
    title: Optional[str]
    first_name: str
    last_name: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    points: int = 0

    def to_dict(self) -> dict:
        return {
            "id": self.student_id,
            "studentCode": self.student_code,
            "classLevel": self.class_level,
            "room": self.room,
            "number": self.number,
            "title": self.title,
            "firstName": self.first_name,
            "lastName": self.last_name,
            "createdAt": to_utc_iso(self.created_at),
            "updatedAt": to_utc_iso(self.updated_at),
            "points": self.points,
        }


@dataclass(frozen=True)
class StudentImportRow:
    """One roster row coming from an admin import."""

    student_code: str
    first_name: str
    last_name: str
    class_level: str = ""
    room: Optional[str] = None
    number: Optional[str] = None
    title: Optional[str] = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "StudentImportRow":
        def pick(*keys: str) -> str:
            for key in keys:
                value = data.get(key)
                if value is not None:
                    return str(value)
            return ""

        return cls(
            student_code=pick("studentCode", "student_code"),
            first_name=pick("firstName", "first_name"),
            last_name=pick("lastName", "last_name"),
            class_level=pick("classLevel", "class_level"),
            room=pick("room"),
            number=pick("number", "studentNumber", "student_number"),
            title=pick("title"),
        )

    def normalized(self) -> Optional["StudentImportRow"]:
        """Trimmed copy, or None when code/first name/last name is blank."""

        code = (self.student_code or "").strip()
        first_name = (self.first_name or "").strip()
        last_name = (self.last_name or "").strip()
        if not code or not first_name or not last_name:
            return None

        return StudentImportRow(
            student_code=code,
            first_name=first_name,
            last_name=last_name,
            class_level=(self.class_level or "").strip() or "-",
            room=blank_to_none(self.room),
            number=blank_to_none(self.number),
            title=blank_to_none(self.title),
        )


@dataclass(frozen=True)
class StudentQuery:
    """Filters for the admin roster view.

    ``room`` is only applied together with ``class_level``. ``None`` means
    "any room", an empty string means "students without a room".
    """

    search: Optional[str] = None
    class_level: Optional[str] = None
    room: Optional[str] = None
    page: int = 1
    limit: int = DEFAULT_STUDENT_PAGE_SIZE

    def clamped(self) -> "StudentQuery":
        search = (self.search or "").strip() or None
        class_level = (self.class_level or "").strip() or None
        room = self.room.strip() if (class_level and self.room is not None) else None
        return StudentQuery(
            search=search,
            class_level=class_level,
            room=room,
            page=max(int(1 if self.page is None else self.page), 1),
            limit=min(max(int(DEFAULT_STUDENT_PAGE_SIZE if self.limit is None else self.limit), 1), MAX_STUDENT_PAGE_SIZE),
        )

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


@dataclass(frozen=True)
class StudentPage:
    students: list[Student] = field(default_factory=list)
    total: int = 0

    def to_dict(self) -> dict:
        return {"students": [s.to_dict() for s in self.students], "total": self.total}


@dataclass(frozen=True)
class ClassRoom:
    class_level: str
    room: Optional[str]

    def to_dict(self) -> dict:
        return {"classLevel": self.class_level, "room": self.room}
