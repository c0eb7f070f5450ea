"""Clock helpers for build run summaries."""

from __future__ import annotations

import time
from datetime import datetime, timezone


def now_utc() -> datetime:
    """Return current timezone-aware UTC timestamp."""

    return datetime.now(timezone.utc)


def elapsed_seconds(started_monotonic: float, digits: int = 3) -> float:
    """Seconds since a `time.monotonic()` reading, rounded for run summaries."""

    return round(time.monotonic() - started_monotonic, digits)
