from __future__ import annotations

from typing import BinaryIO, Iterable, Iterator, Sequence, Union

from ..attendance.service import AttendanceService
from ..common.logging_utils import get_logger
from ..core.exceptions import BackendError, DomainError
from .card_reader import CardScanner

logger = get_logger(__name__)


def read_chunks(stream: BinaryIO, size: int = 64) -> Iterator[bytes]:
    """Raw reader bytes until EOF."""

    return iter(lambda: stream.read(size), b"")


class CardCheckIn:
    """Records a visit for every accepted card scan.

    A rejected scan (unknown card, bad input) is logged and the reader keeps
    going; a backend failure stops the loop.
    """

    def __init__(self, attendance: AttendanceService, scanner: CardScanner, purposes: Sequence[str]):
        self._attendance = attendance
        self._scanner = scanner
        self._purposes = list(purposes)

    def process(self, chunks: Iterable[Union[bytes, str]]) -> list[str]:
        recorded: list[str] = []
        for student_code in self._scanner.scan(chunks):
            try:
                self._attendance.record_visit(student_code, self._purposes)
            except BackendError:
                raise
            except DomainError as e:
                logger.warning("Card %s not checked in: %s", student_code, e)
                continue
            recorded.append(student_code)
        return recorded
