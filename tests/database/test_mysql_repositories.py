from __future__ import annotations

from datetime import date, datetime, time, timedelta

from library_kiosk.attendance.mysql_attendance_repository import MySQLAttendanceRepository
from library_kiosk.database.mysql_base import normalize_mysql_time
from library_kiosk.students.model import StudentImportRow, StudentQuery
from library_kiosk.students.mysql_student_repository import MySQLStudentRepository


class ScriptedCursor:
    """Records executed statements and replays queued result sets."""

    def __init__(self, results=None, rowcount=0):
        self.results = list(results or [])
        self.executed: list[tuple[str, tuple]] = []
        self.rowcount = rowcount
        self._current: list = []

    def execute(self, sql, params=None):
        self.executed.append((" ".join(sql.split()), tuple(params or ())))
        self._current = self.results.pop(0) if self.results else []

    def fetchone(self):
        return self._current[0] if self._current else None

    def fetchall(self):
        return list(self._current)

    def close(self):
        pass


class ScriptedConnection:
    def __init__(self, cursor):
        self._cursor = cursor
        self.commits = 0

    def cursor(self, dictionary=True):
        return self._cursor

    def commit(self):
        self.commits += 1

    def rollback(self):
        pass

    def close(self):
        pass


class ScriptedFactory:
    def __init__(self, cursor):
        self.cursor = cursor

    def connect(self):
        return ScriptedConnection(self.cursor)


STUDENT_ROW = {
    "id": 7,
    "student_code": "19311",
    "class_level": "ม.1",
    "room": None,
    "student_number": "3",
    "title": None,
    "first_name": "Somchai",
    "last_name": "Jaidee",
    "created_at": datetime(2024, 1, 1),
    "updated_at": datetime(2024, 1, 2),
    "points": 5,
}


def test_attendance_upsert_uses_unique_daily_key():
    cur = ScriptedCursor()
    repo = MySQLAttendanceRepository(ScriptedFactory(cur))

    repo.upsert_entry(student_id=7, attendance_date=date(2024, 2, 1), attendance_time=time(9, 30), purposes=("อ่านหนังสือ", "B"))

    sql, params = cur.executed[0]
    assert "ON DUPLICATE KEY UPDATE" in sql
    assert params == (7, date(2024, 2, 1), time(9, 30), '["อ่านหนังสือ", "B"]')


def test_attendance_find_today_decodes_row():
    cur = ScriptedCursor(
        results=[
            [
                {
                    "id": 3,
                    "student_id": 7,
                    "attendance_date": date(2024, 2, 1),
                    "attendance_time": timedelta(hours=9, minutes=30),
                    "purposes": '["A"]',
                    "created_at": None,
                    "updated_at": None,
                }
            ]
        ]
    )
    entry = MySQLAttendanceRepository(ScriptedFactory(cur)).find_today_entry(7, date(2024, 2, 1))

    assert entry.entry_id == 3
    assert entry.attendance_time == time(9, 30)
    assert entry.purposes == ("A",)
    assert cur.executed[0][1] == (7, date(2024, 2, 1))


def test_attendance_listing_escapes_search():
    cur = ScriptedCursor(results=[[]])
    MySQLAttendanceRepository(ScriptedFactory(cur)).list_entries(
        start_date=date(2024, 2, 1), end_date=date(2024, 2, 29), search="50%"
    )

    sql, params = cur.executed[0]
    assert "BETWEEN %s AND %s" in sql
    assert params == (date(2024, 2, 1), date(2024, 2, 29), "%50\\%%", "%50\\%%", "%50\\%%")


def test_student_page_runs_rows_and_count_queries():
    cur = ScriptedCursor(results=[[STUDENT_ROW], [{"total": 12}]])
    query = StudentQuery(class_level="ม.1", room="", page=2, limit=5).clamped()

    page = MySQLStudentRepository(ScriptedFactory(cur)).list_students(query)

    assert page.total == 12
    assert page.students[0].points == 5
    rows_sql, rows_params = cur.executed[0]
    assert "(s.room IS NULL OR s.room = '')" in rows_sql
    assert rows_params == ("ม.1", 5, 5)
    assert cur.executed[1][1] == ("ม.1",)


def test_student_upsert_is_chunked():
    cur = ScriptedCursor()
    rows = [StudentImportRow(student_code=str(i), first_name="F", last_name="L", class_level="-") for i in range(250)]

    assert MySQLStudentRepository(ScriptedFactory(cur)).upsert_students(rows) == 250
    assert [len(params) for _, params in cur.executed] == [700, 700, 350]


def test_student_delete_returns_rowcount():
    cur = ScriptedCursor(rowcount=2)
    assert MySQLStudentRepository(ScriptedFactory(cur)).delete_by_codes(["a", "b"]) == 2
    assert cur.executed[0] == ("DELETE FROM students WHERE student_code IN (%s,%s)", ("a", "b"))


def test_normalize_mysql_time_variants():
    assert normalize_mysql_time("08:30:00") == time(8, 30)
    assert normalize_mysql_time(b"08:30") == time(8, 30)
    assert normalize_mysql_time(timedelta(hours=25, minutes=1)) == time(1, 1)
    assert normalize_mysql_time(None) is None
