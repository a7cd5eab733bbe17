from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .access.service import AdminAccessService
from .attendance.service import AttendanceService
from .core.constants import DEFAULT_ADMIN_SESSION_TOKEN, DEFAULT_TIMEZONE
from .store import RecordStore, build_record_store
from .students.service import StudentDirectory


@dataclass(frozen=True)
class Container:
    store: RecordStore

    student_directory: StudentDirectory
    attendance_service: AttendanceService
    admin_access: AdminAccessService


def build_container(settings, *, store: Optional[RecordStore] = None) -> Container:
    """Wire services from a settings module (or any object with the same attributes)."""

    if store is None:
        store = build_record_store(
            backend=str(getattr(settings, "STORE_BACKEND", "mysql")),
            db_config=dict(getattr(settings, "DB_CONFIG", {}) or {}),
            sheets_config=dict(getattr(settings, "SHEETS_CONFIG", {}) or {}),
        )

    student_directory = StudentDirectory(store.students)
    attendance_service = AttendanceService(
        store.attendance,
        student_directory,
        timezone_name=str(getattr(settings, "LIBRARY_TIMEZONE", DEFAULT_TIMEZONE)),
    )
    admin_access = AdminAccessService(
        password=str(getattr(settings, "ADMIN_PASSWORD", "") or ""),
        password_hash=str(getattr(settings, "ADMIN_PASSWORD_HASH", "") or ""),
        session_token=str(getattr(settings, "ADMIN_SESSION_TOKEN", DEFAULT_ADMIN_SESSION_TOKEN) or ""),
    )

    return Container(
        store=store,
        student_directory=student_directory,
        attendance_service=attendance_service,
        admin_access=admin_access,
    )
