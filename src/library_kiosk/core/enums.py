from __future__ import annotations

from enum import Enum


class StoreBackend(str, Enum):
    """Storage backend selected at startup."""

    MYSQL = "mysql"
    SHEETS = "sheets"

    @classmethod
    def parse(cls, value: str) -> "StoreBackend":
        normalized = (value or "").strip().lower()
        if normalized in {"sheet", "sheets", "google", "google-sheets", "gsheets"}:
            return cls.SHEETS
        if normalized in {"", "mysql", "sql", "db"}:
            return cls.MYSQL
        raise ValueError(f"Unknown STORE_BACKEND: {value!r}")
