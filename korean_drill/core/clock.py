"""Clock port used for all interval math."""

from __future__ import annotations

import time
from datetime import date, datetime, timezone
from typing import Protocol

SECONDS_PER_DAY = 86400


class Clock(Protocol):
    """Source of the current time as epoch seconds."""

    def now(self) -> float:
        ...


class SystemClock:
    """Wall clock backed by time.time()."""

    def now(self) -> float:
        return time.time()


def utc_date(timestamp: float) -> date:
    """Calendar date (UTC) of an epoch timestamp."""
    return datetime.fromtimestamp(timestamp, tz=timezone.utc).date()
