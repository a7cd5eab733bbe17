from __future__ import annotations

from datetime import date, time
from typing import Any, Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import (
    db_cursor,
    fetchall,
    fetchone,
    like_pattern,
    normalize_mysql_datetime,
    normalize_mysql_time,
)
from .model import AttendanceEntry, AttendanceRecord, decode_purposes, encode_purposes
from .repository import AttendanceRepository


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def find_today_entry(self, student_id: int, today: date) -> Optional[AttendanceEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT id, student_id, attendance_date, attendance_time, purposes, created_at, updated_at
                FROM attendance_logs
                WHERE student_id = %s AND attendance_date = %s
                LIMIT 1
                """,
                (student_id, today),
            )
            r = fetchone(cur)
            if not r:
                return None
            return AttendanceEntry(
                entry_id=int(r["id"]),
                student_id=int(r["student_id"]),
                attendance_date=r["attendance_date"],
                attendance_time=normalize_mysql_time(r["attendance_time"]),
                purposes=decode_purposes(r.get("purposes")),
                created_at=normalize_mysql_datetime(r.get("created_at")),
                updated_at=normalize_mysql_datetime(r.get("updated_at")),
            )

    def upsert_entry(
        self,
        *,
        student_id: int,
        attendance_date: date,
        attendance_time: time,
        purposes: tuple[str, ...],
    ) -> None:
        # The unique (student_id, attendance_date) key resolves a racing first
        # check-in inside the engine instead of a read-then-insert here.
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance_logs (student_id, attendance_date, attendance_time, purposes)
                VALUES (%s, %s, %s, %s)
                ON DUPLICATE KEY UPDATE
                    attendance_time = VALUES(attendance_time),
                    purposes = VALUES(purposes)
                """,
                (student_id, attendance_date, attendance_time, encode_purposes(purposes)),
            )

    def delete_entry(self, entry_id: int) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM attendance_logs WHERE id = %s", (int(entry_id),))

    def list_entries(
        self,
        *,
        start_date: date,
        end_date: date,
        search: Optional[str] = None,
    ) -> Sequence[AttendanceRecord]:
        clauses = ["a.attendance_date BETWEEN %s AND %s"]
        params: list[Any] = [start_date, end_date]

        if search:
            clauses.append("(s.student_code LIKE %s OR s.first_name LIKE %s OR s.last_name LIKE %s)")
            like_value = like_pattern(search)
            params.extend([like_value, like_value, like_value])

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT
                    a.id, a.student_id, a.attendance_date, a.attendance_time, a.purposes,
                    s.student_code, s.class_level,
                    NULLIF(s.room, '') AS room,
                    NULLIF(s.title, '') AS title,
                    NULLIF(s.student_number, '') AS student_number,
                    s.first_name, s.last_name
                FROM attendance_logs a
                INNER JOIN students s ON s.id = a.student_id
                WHERE {where}
                ORDER BY a.attendance_date DESC, a.attendance_time DESC
                """,
                tuple(params),
            )
            rows = fetchall(cur)

        return [
            AttendanceRecord(
                entry_id=int(r["id"]),
                student_id=int(r["student_id"]),
                student_code=r["student_code"],
                attendance_date=r["attendance_date"],
                attendance_time=normalize_mysql_time(r["attendance_time"]),
                purposes=decode_purposes(r.get("purposes")),
                class_level=r["class_level"],
                room=r.get("room"),
                title=r.get("title"),
                number=r.get("student_number"),
                first_name=r["first_name"],
                last_name=r["last_name"],
            )
            for r in rows
        ]
