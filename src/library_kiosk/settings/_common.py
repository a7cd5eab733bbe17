"""Settings shared by every environment, read from the process environment."""

import os

from ..core.constants import DEFAULT_ADMIN_SESSION_TOKEN, DEFAULT_POOL_SIZE, DEFAULT_TIMEZONE

STORE_BACKEND = os.getenv("STORE_BACKEND", "mysql")

DB_CONFIG = {
    "host": os.getenv("MYSQL_HOST", "127.0.0.1"),
    "port": int(os.getenv("MYSQL_PORT", "3306")),
    "user": os.getenv("MYSQL_USER", "root"),
    "password": os.getenv("MYSQL_PASSWORD", ""),
    "database": os.getenv("MYSQL_DATABASE", "library_system"),
    "pool_size": int(os.getenv("MYSQL_POOL_SIZE", str(DEFAULT_POOL_SIZE))),
}

SHEETS_CONFIG = {
    "spreadsheet_id": os.getenv("GOOGLE_SHEETS_SPREADSHEET_ID", ""),
    "service_account_email": os.getenv("GOOGLE_SERVICE_ACCOUNT_EMAIL", ""),
    "private_key": os.getenv("GOOGLE_SERVICE_ACCOUNT_PRIVATE_KEY", ""),
    "students_sheet_name": os.getenv("GOOGLE_SHEETS_STUDENTS_SHEET", "Students"),
    "attendance_sheet_name": os.getenv("GOOGLE_SHEETS_ATTENDANCE_SHEET", "Attendance"),
}

LIBRARY_TIMEZONE = os.getenv("LIBRARY_TIMEZONE", DEFAULT_TIMEZONE)

ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD", "")
ADMIN_PASSWORD_HASH = os.getenv("ADMIN_PASSWORD_HASH", "")
ADMIN_SESSION_TOKEN = os.getenv("ADMIN_SESSION_TOKEN", DEFAULT_ADMIN_SESSION_TOKEN)

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
