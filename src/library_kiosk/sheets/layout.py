from __future__ import annotations

from dataclasses import dataclass

STUDENT_HEADERS = (
    "id",
    "studentCode",
    "classLevel",
    "room",
    "number",
    "title",
    "firstName",
    "lastName",
    "createdAt",
    "updatedAt",
)

ATTENDANCE_HEADERS = (
    "id",
    "studentId",
    "attendanceDate",
    "attendanceTime",
    "purposes",
    "createdAt",
    "updatedAt",
)


@dataclass(frozen=True)
class SheetLayout:
    """A worksheet whose first row is a fixed header row."""

    title: str
    headers: tuple[str, ...]

    @property
    def end_column(self) -> str:
        return column_label(len(self.headers))

    @property
    def header_range(self) -> str:
        return f"A1:{self.end_column}1"

    @property
    def data_range(self) -> str:
        return f"A2:{self.end_column}"

    def to_values(self, row: dict) -> list[str]:
        return ["" if row.get(h) is None else str(row.get(h)) for h in self.headers]

    def from_values(self, values: list) -> dict[str, str]:
        padded = [("" if v is None else str(v)) for v in values] + [""] * len(self.headers)
        return {h: padded[i] for i, h in enumerate(self.headers)}


def column_label(index: int) -> str:
    """1 -> A, 26 -> Z, 27 -> AA."""

    if index < 1:
        raise ValueError(f"Column index must be >= 1, got {index}")
    label = ""
    current = index
    while current > 0:
        current, remainder = divmod(current - 1, 26)
        label = chr(65 + remainder) + label
    return label
