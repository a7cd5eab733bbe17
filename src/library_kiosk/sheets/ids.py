from __future__ import annotations

import random
import time
from typing import Collection, Optional


def generate_record_id(
    existing_ids: Optional[Collection[str]] = None,
    *,
    now_ms: Optional[int] = None,
    rng: random.Random | None = None,
) -> int:
    """Client-side id for sheet rows: epoch millis plus a random offset.

    Sheets has no auto-increment, so the value is bumped by a random step
    until it is absent from ``existing_ids``. This is only collision safe
    against the ids this process has read; another writer can still pick
    the same value.
    """

    rng = rng or random.Random()
    base = int(time.time() * 1000) if now_ms is None else int(now_ms)
    value = base + rng.randrange(1000)
    if existing_ids is None:
        return value
    while str(value) in existing_ids:
        value += rng.randrange(1000) + 1
    return value
