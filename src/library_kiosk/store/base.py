from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from ..attendance.repository import AttendanceRepository
from ..core.enums import StoreBackend
from ..students.repository import StudentRepository


@dataclass(frozen=True)
class RecordStore:
    """The two collections of one backend plus its health check."""

    backend: StoreBackend
    students: StudentRepository
    attendance: AttendanceRepository
    health_check: Callable[[], None]

    def ping(self) -> None:
        self.health_check()
