"""
Cooperative countdown timer for timed drills.

Only one countdown is active per timer: starting a new one cancels the
previous one. The host polls the timer; expiry fires the callback once.
"""

from __future__ import annotations

from collections.abc import Callable

from .clock import Clock


class CountdownTimer:
    """Single-slot countdown driven by poll()."""

    def __init__(self, clock: Clock):
        self.clock = clock
        self._deadline: float | None = None
        self._duration = 0.0
        self._on_expire: Callable[[], None] | None = None

    @property
    def active(self) -> bool:
        return self._deadline is not None

    def start(self, seconds: float, on_expire: Callable[[], None]) -> None:
        """Start a countdown, cancelling any running one."""
        self.cancel()
        self._duration = float(seconds)
        self._deadline = self.clock.now() + self._duration
        self._on_expire = on_expire

    def cancel(self) -> None:
        self._deadline = None
        self._on_expire = None

    def remaining(self) -> float:
        """Seconds left (0 when idle or expired)."""
        if self._deadline is None:
            return 0.0
        return max(0.0, self._deadline - self.clock.now())

    def fraction_remaining(self) -> float:
        """Remaining share of the countdown in [0, 1]."""
        if self._deadline is None or self._duration <= 0:
            return 0.0
        return self.remaining() / self._duration

    def poll(self) -> bool:
        """
        Fire the callback if the deadline has passed.

        Returns:
            True if the countdown expired on this call
        """
        if self._deadline is None or self.clock.now() < self._deadline:
            return False
        callback = self._on_expire
        self.cancel()
        if callback is not None:
            callback()
        return True
