from __future__ import annotations

import threading
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Optional

import gspread
from google.auth.exceptions import GoogleAuthError
from google.oauth2.service_account import Credentials

from ..common.logging_utils import get_logger
from ..core.exceptions import BackendError, ConfigurationError
from .layout import ATTENDANCE_HEADERS, STUDENT_HEADERS, SheetLayout

logger = get_logger(__name__)

SHEETS_SCOPES = ["https://www.googleapis.com/auth/spreadsheets"]
TOKEN_URI = "https://oauth2.googleapis.com/token"


@dataclass(frozen=True)
class SheetsConfig:
    spreadsheet_id: str
    service_account_email: str
    private_key: str
    students_sheet_name: str = "Students"
    attendance_sheet_name: str = "Attendance"

    @classmethod
    def from_dict(cls, sheets_config: dict) -> "SheetsConfig":
        return cls(
            spreadsheet_id=str(sheets_config.get("spreadsheet_id") or ""),
            service_account_email=str(sheets_config.get("service_account_email") or ""),
            # Keys pasted into .env files usually carry literal "\n".
            private_key=str(sheets_config.get("private_key") or "").replace("\\n", "\n"),
            students_sheet_name=str(sheets_config.get("students_sheet_name") or "Students"),
            attendance_sheet_name=str(sheets_config.get("attendance_sheet_name") or "Attendance"),
        )

    def validate(self) -> None:
        if not self.spreadsheet_id:
            raise ConfigurationError("GOOGLE_SHEETS_SPREADSHEET_ID is not set")
        if not self.service_account_email:
            raise ConfigurationError("GOOGLE_SERVICE_ACCOUNT_EMAIL is not set")
        if not self.private_key:
            raise ConfigurationError("GOOGLE_SERVICE_ACCOUNT_PRIVATE_KEY is not set")

    @property
    def students_layout(self) -> SheetLayout:
        return SheetLayout(title=self.students_sheet_name, headers=STUDENT_HEADERS)

    @property
    def attendance_layout(self) -> SheetLayout:
        return SheetLayout(title=self.attendance_sheet_name, headers=ATTENDANCE_HEADERS)


@contextmanager
def sheets_errors():
    """Re-raise transport/API failures as ``BackendError``."""

    try:
        yield
    except BackendError:
        raise
    except (gspread.exceptions.GSpreadException, GoogleAuthError, OSError, ValueError) as exc:
        raise BackendError(str(exc) or exc.__class__.__name__) from exc


class SheetsClient:
    """Whole-sheet read/replace access to the kiosk spreadsheet.

    Authorization and the header-row check each run once per process,
    lazily, under a lock. A failed attempt is forgotten so the next call
    retries it.
    """

    def __init__(self, config: SheetsConfig):
        self._config = config
        self._lock = threading.Lock()
        self._spreadsheet: Optional[gspread.Spreadsheet] = None
        self._structure_ready = False

    @property
    def config(self) -> SheetsConfig:
        return self._config

    def layouts(self) -> tuple[SheetLayout, SheetLayout]:
        return self._config.students_layout, self._config.attendance_layout

    def _open(self) -> gspread.Spreadsheet:
        if self._spreadsheet is not None:
            return self._spreadsheet
        self._config.validate()
        with self._lock:
            if self._spreadsheet is None:
                credentials = Credentials.from_service_account_info(
                    {
                        "type": "service_account",
                        "client_email": self._config.service_account_email,
                        "private_key": self._config.private_key,
                        "token_uri": TOKEN_URI,
                    },
                    scopes=SHEETS_SCOPES,
                )
                client = gspread.authorize(credentials)
                self._spreadsheet = client.open_by_key(self._config.spreadsheet_id)
                logger.info("Authorized Google Sheets client for %s", self._config.service_account_email)
            return self._spreadsheet

    def ensure_structure(self) -> None:
        if self._structure_ready:
            return
        with sheets_errors():
            spreadsheet = self._open()
            with self._lock:
                if self._structure_ready:
                    return
                existing = {ws.title for ws in spreadsheet.worksheets()}
                for layout in self.layouts():
                    if layout.title not in existing:
                        spreadsheet.add_worksheet(title=layout.title, rows=1000, cols=len(layout.headers))
                        logger.info("Created worksheet %r", layout.title)
                    spreadsheet.worksheet(layout.title).update(
                        range_name=layout.header_range,
                        values=[list(layout.headers)],
                        value_input_option="RAW",
                    )
                self._structure_ready = True

    def _worksheet(self, layout: SheetLayout) -> gspread.Worksheet:
        self.ensure_structure()
        return self._open().worksheet(layout.title)

    def read_rows(self, layout: SheetLayout) -> list[dict[str, str]]:
        with sheets_errors():
            values = self._worksheet(layout).get(layout.data_range)
        return [layout.from_values(list(row)) for row in (values or []) if any(str(v).strip() for v in row)]

    def write_rows(self, layout: SheetLayout, rows: list[dict]) -> None:
        """Replace every data row of the sheet with ``rows``."""

        with sheets_errors():
            worksheet = self._worksheet(layout)
            worksheet.batch_clear([layout.data_range])
            if not rows:
                return
            needed = len(rows) + 1
            if worksheet.row_count < needed:
                worksheet.add_rows(needed - worksheet.row_count)
            worksheet.update(
                range_name=f"A2:{layout.end_column}{needed}",
                values=[layout.to_values(row) for row in rows],
                value_input_option="RAW",
            )

    def table(self, layout: SheetLayout) -> "SheetTable":
        return SheetTable(self, layout)


class SheetTable:
    """One worksheet bound to its layout."""

    def __init__(self, client: SheetsClient, layout: SheetLayout):
        self._client = client
        self.layout = layout

    def read(self) -> list[dict[str, str]]:
        return self._client.read_rows(self.layout)

    def write(self, rows: list[dict]) -> None:
        self._client.write_rows(self.layout, rows)
