"""Card-scan handling for the RFID reader on the kiosk.

The reader bridge streams frames such as ``200:dis,19311|43239*``; the
student code is the first digit run after the comma. This module turns
raw chunks into accepted scans; ``checkin.CardCheckIn`` records them.
"""

from __future__ import annotations

import re
import time
from typing import Callable, Iterable, Iterator, Optional, Union

from ..common.logging_utils import get_logger
from ..core.constants import CARD_SCAN_COOLDOWN_SECONDS

logger = get_logger(__name__)

FRAME_TERMINATOR = "*"
_DIGITS = re.compile(r"\d+")


def extract_card_id(message: str) -> Optional[str]:
    parts = message.split(",")
    if len(parts) < 2:
        return None
    match = _DIGITS.search(parts[1])
    return match.group(0) if match else None


class CardMessageParser:
    """Reassembles ``*``-terminated frames from arbitrary chunks."""

    def __init__(self, encoding: str = "utf-8"):
        self._encoding = encoding
        self._buffer = ""

    def feed(self, chunk: Union[bytes, str]) -> list[str]:
        if isinstance(chunk, (bytes, bytearray)):
            chunk = bytes(chunk).decode(self._encoding, errors="ignore")
        self._buffer += chunk

        messages: list[str] = []
        while FRAME_TERMINATOR in self._buffer:
            message, self._buffer = self._buffer.split(FRAME_TERMINATOR, 1)
            if message:
                messages.append(message)
        return messages

    @property
    def pending(self) -> str:
        return self._buffer


class ScanCooldown:
    """Drops repeat reads of the same card inside the cooldown window."""

    def __init__(self, cooldown_seconds: float = CARD_SCAN_COOLDOWN_SECONDS):
        self._cooldown = float(cooldown_seconds)
        self._last_id: Optional[str] = None
        self._last_at = 0.0

    def accept(self, card_id: str, now: float) -> bool:
        if card_id == self._last_id and (now - self._last_at) < self._cooldown:
            return False
        self._last_id = card_id
        self._last_at = now
        return True

    def reset(self) -> None:
        self._last_id = None
        self._last_at = 0.0


class CardScanner:
    """Parser + cooldown: raw reader chunks in, accepted student codes out."""

    def __init__(
        self,
        *,
        cooldown_seconds: float = CARD_SCAN_COOLDOWN_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._parser = CardMessageParser()
        self._cooldown = ScanCooldown(cooldown_seconds)
        self._clock = clock
        self._enabled = True

    @property
    def enabled(self) -> bool:
        return self._enabled

    def set_enabled(self, enabled: bool) -> None:
        # Toggling (e.g. while a registration form is open) starts fresh.
        self._enabled = bool(enabled)
        self._cooldown.reset()

    def feed(self, chunk: Union[bytes, str]) -> list[str]:
        accepted: list[str] = []
        for message in self._parser.feed(chunk):
            if not self._enabled:
                logger.debug("Card scan ignored while disabled: %s", message)
                continue
            card_id = extract_card_id(message)
            if card_id is None:
                continue
            if self._cooldown.accept(card_id, self._clock()):
                accepted.append(card_id)
            else:
                logger.debug("Duplicate card scan ignored: %s", card_id)
        return accepted

    def scan(self, chunks: Iterable[Union[bytes, str]]) -> Iterator[str]:
        for chunk in chunks:
            yield from self.feed(chunk)
