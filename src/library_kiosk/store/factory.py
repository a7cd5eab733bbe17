from __future__ import annotations

from ..attendance.mysql_attendance_repository import MySQLAttendanceRepository
from ..attendance.sheets_attendance_repository import SheetsAttendanceRepository
from ..common.logging_utils import get_logger
from ..core.enums import StoreBackend
from ..database.connection import DatabaseConnection, DBConfig
from ..sheets.client import SheetsClient, SheetsConfig
from ..students.mysql_student_repository import MySQLStudentRepository
from ..students.sheets_student_repository import SheetsStudentRepository
from .base import RecordStore

logger = get_logger(__name__)


def build_mysql_store(db_config: dict) -> RecordStore:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))
    students = MySQLStudentRepository(conn)
    return RecordStore(
        backend=StoreBackend.MYSQL,
        students=students,
        attendance=MySQLAttendanceRepository(conn),
        health_check=students.ping,
    )


def build_sheets_store(sheets_config: dict) -> RecordStore:
    client = SheetsClient(SheetsConfig.from_dict(sheets_config))
    students_layout, attendance_layout = client.layouts()
    students_table = client.table(students_layout)
    attendance_table = client.table(attendance_layout)

    students = SheetsStudentRepository(students_table, attendance_table)
    return RecordStore(
        backend=StoreBackend.SHEETS,
        students=students,
        attendance=SheetsAttendanceRepository(attendance_table, students_table),
        health_check=students.ping,
    )


def build_record_store(*, backend: str, db_config: dict | None = None, sheets_config: dict | None = None) -> RecordStore:
    """Select the storage backend once, at startup."""

    selected = StoreBackend.parse(backend)
    logger.info("Using %s record store", selected.value)
    if selected is StoreBackend.SHEETS:
        return build_sheets_store(sheets_config or {})
    return build_mysql_store(db_config or {})
