from __future__ import annotations

from typing import Any, Optional, Sequence

from ..core.constants import STUDENT_UPSERT_CHUNK_SIZE
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, like_pattern, normalize_mysql_datetime, placeholders
from .model import ClassRoom, Student, StudentImportRow, StudentPage, StudentQuery
from .repository import StudentRepository

_STUDENT_COLUMNS = """
    s.id,
    s.student_code,
    s.class_level,
    NULLIF(s.room, '') AS room,
    NULLIF(s.student_number, '') AS student_number,
    NULLIF(s.title, '') AS title,
    s.first_name,
    s.last_name,
    s.created_at,
    s.updated_at,
    COALESCE(score.total_points, 0) AS points
"""

# Points are score adjustments keyed by student code, summed for display.
_SCORE_JOIN = """
    LEFT JOIN (
        SELECT student_id, SUM(change_value) AS total_points
        FROM library_scores
        GROUP BY student_id
    ) score ON score.student_id = s.student_code
"""


def _to_student(r: dict) -> Student:
    return Student(
        student_id=int(r["id"]),
        student_code=r["student_code"],
        class_level=r["class_level"],
        room=r.get("room"),
        number=r.get("student_number"),
        title=r.get("title"),
        first_name=r["first_name"],
        last_name=r["last_name"],
        created_at=normalize_mysql_datetime(r.get("created_at")),
        updated_at=normalize_mysql_datetime(r.get("updated_at")),
        points=int(r.get("points") or 0),
    )


def _where_clause(query: StudentQuery) -> tuple[str, list[Any]]:
    clauses: list[str] = []
    params: list[Any] = []

    if query.class_level:
        clauses.append("s.class_level = %s")
        params.append(query.class_level)
        if query.room is not None:
            if query.room:
                clauses.append("COALESCE(s.room, '') = %s")
                params.append(query.room)
            else:
                clauses.append("(s.room IS NULL OR s.room = '')")

    if query.search:
        clauses.append("(s.student_code LIKE %s OR s.first_name LIKE %s OR s.last_name LIKE %s)")
        like_value = like_pattern(query.search)
        params.extend([like_value, like_value, like_value])

    where = f"WHERE {' AND '.join(clauses)}" if clauses else ""
    return where, params


class MySQLStudentRepository(StudentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def find_by_code(self, student_code: str) -> Optional[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_STUDENT_COLUMNS}
                FROM students s
                {_SCORE_JOIN}
                WHERE s.student_code = %s
                LIMIT 1
                """,
                (student_code,),
            )
            r = fetchone(cur)
            return _to_student(r) if r else None

    def list_students(self, query: StudentQuery) -> StudentPage:
        where, params = _where_clause(query)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_STUDENT_COLUMNS}
                FROM students s
                {_SCORE_JOIN}
                {where}
                ORDER BY
                    s.class_level,
                    COALESCE(s.room, ''),
                    CAST(NULLIF(s.student_number, '') AS UNSIGNED),
                    s.student_number,
                    s.first_name,
                    s.last_name
                LIMIT %s OFFSET %s
                """,
                (*params, int(query.limit), int(query.offset)),
            )
            students = [_to_student(r) for r in fetchall(cur)]

            cur.execute(f"SELECT COUNT(*) AS total FROM students s {where}", tuple(params))
            total_row = fetchone(cur)

        return StudentPage(students=students, total=int(total_row["total"]) if total_row else 0)

    def upsert_students(self, rows: Sequence[StudentImportRow]) -> int:
        if not rows:
            return 0

        with db_cursor(self._conn_factory) as (_, cur):
            for start in range(0, len(rows), STUDENT_UPSERT_CHUNK_SIZE):
                chunk = rows[start : start + STUDENT_UPSERT_CHUNK_SIZE]
                values = ",".join([f"({placeholders(7)})"] * len(chunk))
                params: list[Any] = []
                for row in chunk:
                    params.extend(
                        [
                            row.student_code,
                            row.class_level,
                            row.room,
                            row.number,
                            row.title,
                            row.first_name,
                            row.last_name,
                        ]
                    )
                cur.execute(
                    f"""
                    INSERT INTO students
                        (student_code, class_level, room, student_number, title, first_name, last_name)
                    VALUES {values}
                    ON DUPLICATE KEY UPDATE
                        class_level = VALUES(class_level),
                        room = VALUES(room),
                        student_number = VALUES(student_number),
                        title = VALUES(title),
                        first_name = VALUES(first_name),
                        last_name = VALUES(last_name),
                        updated_at = CURRENT_TIMESTAMP
                    """,
                    tuple(params),
                )
        return len(rows)

    def delete_by_codes(self, codes: Sequence[str]) -> int:
        if not codes:
            return 0
        # attendance_logs rows go with them through ON DELETE CASCADE.
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"DELETE FROM students WHERE student_code IN ({placeholders(len(codes))})",
                tuple(codes),
            )
            return int(cur.rowcount or 0)

    def list_codes(self) -> list[str]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT DISTINCT student_code AS code FROM students ORDER BY student_code")
            return [r["code"] for r in fetchall(cur)]

    def list_class_rooms(self) -> list[ClassRoom]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT DISTINCT class_level, NULLIF(room, '') AS room
                FROM students
                ORDER BY class_level, room
                """
            )
            return [ClassRoom(class_level=r["class_level"], room=r.get("room")) for r in fetchall(cur)]

    def ping(self) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT 1 AS ok")
            fetchall(cur)
