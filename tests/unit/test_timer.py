"""
Unit tests for the countdown timer.
"""

from korean_drill.core.timer import CountdownTimer


class TestCountdownTimer:
    def test_idle_timer(self, clock):
        timer = CountdownTimer(clock)
        assert not timer.active
        assert timer.remaining() == 0.0
        assert timer.poll() is False

    def test_expires_once(self, clock):
        fired = []
        timer = CountdownTimer(clock)
        timer.start(15, lambda: fired.append(True))

        clock.advance(seconds=10)
        assert timer.poll() is False
        assert timer.remaining() == 5.0
        assert timer.fraction_remaining() == 5.0 / 15.0

        clock.advance(seconds=5)
        assert timer.poll() is True
        assert timer.poll() is False
        assert fired == [True]
        assert not timer.active

    def test_restart_cancels_previous(self, clock):
        fired = []
        timer = CountdownTimer(clock)
        timer.start(5, lambda: fired.append("first"))
        timer.start(10, lambda: fired.append("second"))

        clock.advance(seconds=10)
        timer.poll()
        assert fired == ["second"]

    def test_cancel(self, clock):
        fired = []
        timer = CountdownTimer(clock)
        timer.start(1, lambda: fired.append(True))
        timer.cancel()
        clock.advance(seconds=5)
        assert timer.poll() is False
        assert fired == []
