"""
Daily study streak ledger.

Stored as JSON under a single key:
    {"count": 4, "lastDate": "2026-03-02", "days": ["2026-02-27", ...]}

`days` keeps a rolling window (90 days by default) for the streak calendar.
A lapsed streak is observed lazily: the stored count is only reset on the
next study day.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import date, timedelta

from loguru import logger

from .clock import Clock, utc_date
from .errors import MalformedDataError
from .storage import KeyValueStore, safe_save


@dataclass
class StreakLedger:
    """Persisted streak record."""

    count: int = 0
    last_date: str = ""
    days: list[str] = field(default_factory=list)

    def to_json(self) -> str:
        return json.dumps({"count": self.count, "lastDate": self.last_date, "days": self.days})

    @classmethod
    def from_json(cls, raw: str) -> StreakLedger:
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            raise MalformedDataError(f"Streak ledger is not valid JSON: {e}") from e
        if not isinstance(data, dict):
            raise MalformedDataError("Streak ledger is not a mapping")

        days = data.get("days") or []
        if not isinstance(days, list) or not all(isinstance(d, str) for d in days):
            raise MalformedDataError("Streak ledger days must be a list of ISO dates")
        try:
            count = int(data.get("count") or 0)
        except (TypeError, ValueError) as e:
            raise MalformedDataError(f"Streak count is not an integer: {e}") from e
        return cls(count=count, last_date=str(data.get("lastDate") or ""), days=list(days))


@dataclass(frozen=True)
class CalendarDay:
    """One cell of the streak calendar."""

    date: date
    studied: bool
    is_today: bool


class StreakTracker:
    """Counts consecutive calendar days with at least one recorded review."""

    DEFAULT_KEY = "korean_streak"
    DEFAULT_WINDOW_DAYS = 90

    def __init__(
        self,
        store: KeyValueStore,
        clock: Clock,
        key: str = DEFAULT_KEY,
        window_days: int = DEFAULT_WINDOW_DAYS,
    ):
        self.store = store
        self.clock = clock
        self.key = key
        self.window_days = window_days

    def _today(self) -> date:
        return utc_date(self.clock.now())

    def load(self) -> StreakLedger:
        """Read the ledger, treating missing or malformed data as empty."""
        raw = self.store.get(self.key)
        if not raw:
            return StreakLedger()
        try:
            return StreakLedger.from_json(raw)
        except MalformedDataError as e:
            logger.warning(f"Ignoring malformed streak ledger: {e}")
            return StreakLedger()

    def get_streak(self) -> int:
        """Current streak; 0 if the last study day is before yesterday."""
        ledger = self.load()
        today = self._today()
        yesterday = today - timedelta(days=1)
        if ledger.last_date in (today.isoformat(), yesterday.isoformat()):
            return ledger.count
        return 0

    def record_study_day(self) -> bool:
        """
        Mark today as studied.

        Returns:
            True if the ledger changed, False if today was already recorded
        """
        ledger = self.load()
        today = self._today()
        today_iso = today.isoformat()
        if ledger.last_date == today_iso:
            return False

        yesterday_iso = (today - timedelta(days=1)).isoformat()
        if ledger.last_date == yesterday_iso:
            ledger.count += 1
        else:
            ledger.count = 1
        ledger.last_date = today_iso

        if today_iso not in ledger.days:
            ledger.days.append(today_iso)
        cutoff = (today - timedelta(days=self.window_days)).isoformat()
        ledger.days = [d for d in ledger.days if d >= cutoff]

        safe_save(self.store, self.key, ledger.to_json())
        logger.debug(f"Study day recorded: {today_iso} (streak {ledger.count})")
        return True

    def calendar(self, span_days: int = 55) -> list[CalendarDay]:
        """
        Calendar cells from the Monday on or before `today - span_days` through today.
        """
        studied = set(self.load().days)
        today = self._today()
        start = today - timedelta(days=span_days)
        start -= timedelta(days=start.weekday())

        cells = []
        day = start
        while day <= today:
            cells.append(
                CalendarDay(date=day, studied=day.isoformat() in studied, is_today=day == today)
            )
            day += timedelta(days=1)
        return cells
