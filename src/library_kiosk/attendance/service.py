from __future__ import annotations

from datetime import date, datetime
from typing import Iterable, Optional, Sequence

from ..common.datetime_utils import now_in, resolve_month_range, resolve_timezone
from ..common.logging_utils import get_logger
from ..common.validators import merge_purposes, normalize_purposes, parse_positive_int
from ..core import messages
from ..core.constants import DEFAULT_TIMEZONE
from ..core.exceptions import UnknownStudentError, ValidationError
from ..students.service import StudentDirectory
from .model import AttendanceListing, AttendanceRecord, AttendanceStats
from .repository import AttendanceRepository

logger = get_logger(__name__)


class AttendanceService:
    """Daily check-in logic shared by both storage backends.

    "Today" is always computed in the library timezone, never in the
    caller's local time, so one visit day means the same thing everywhere.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        students: StudentDirectory,
        *,
        timezone_name: str = DEFAULT_TIMEZONE,
    ):
        self._attendance = attendance
        self._students = students
        self._timezone_name = resolve_timezone(timezone_name).key

    def now(self) -> datetime:
        return now_in(self._timezone_name)

    def record_visit(self, student_code: Optional[str], purposes: Iterable[str], *, now: datetime | None = None) -> None:
        code = (student_code or "").strip()
        normalized = normalize_purposes(purposes)
        if not code or not normalized:
            raise ValidationError(messages.MISSING_CHECKIN_FIELDS)

        student = self._students.find_by_code(code)
        if not student:
            raise UnknownStudentError(messages.UNKNOWN_STUDENT)

        now = now or self.now()
        today = now.date()
        visit_time = now.time().replace(microsecond=0, tzinfo=None)

        existing = self._attendance.find_today_entry(student.student_id, today)
        merged = merge_purposes(existing.purposes, normalized) if existing else normalized

        self._attendance.upsert_entry(
            student_id=student.student_id,
            attendance_date=today,
            attendance_time=visit_time,
            purposes=merged,
        )
        logger.info(
            "Recorded visit student=%s date=%s purposes=%s (%s)",
            code,
            today.isoformat(),
            list(merged),
            "merged" if existing else "new",
        )

    def list_visits(
        self,
        month: Optional[str] = None,
        search: Optional[str] = None,
        *,
        today: date | None = None,
    ) -> AttendanceListing:
        today = today or self.now().date()
        month_range = resolve_month_range(month, today=today)
        term = (search or "").strip() or None

        rows = self._attendance.list_entries(
            start_date=month_range.start,
            end_date=month_range.end,
            search=term,
        )
        records = sorted(
            (r for r in rows if month_range.contains(r.attendance_date)),
            key=lambda r: (r.attendance_date, r.attendance_time),
            reverse=True,
        )
        return AttendanceListing(records=records, stats=self.build_stats(records))

    def delete_visit(self, entry_id) -> None:
        entry_id = parse_positive_int(entry_id, messages.INVALID_ID)
        self._attendance.delete_entry(entry_id)
        logger.info("Deleted attendance entry id=%d", entry_id)

    @staticmethod
    def build_stats(records: Sequence[AttendanceRecord]) -> AttendanceStats:
        purpose_counts: dict[str, int] = {}
        student_ids: set[int] = set()

        for r in records:
            student_ids.add(r.student_id)
            for purpose in dict.fromkeys(r.purposes):
                if purpose:
                    purpose_counts[purpose] = purpose_counts.get(purpose, 0) + 1

        return AttendanceStats(
            total_records=len(records),
            unique_students=len(student_ids),
            purpose_counts=purpose_counts,
        )
