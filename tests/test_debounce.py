"""
Tests for Debouncer
"""

import logging
import threading
import time

from cart.debounce import Debouncer


class TestDebouncer:
    """Tests for the coalescing timer."""

    def test_burst_runs_once_with_latest_args(self, timers):
        calls = []
        debouncer = Debouncer(0.3, calls.append, timers)

        for value in range(4):
            debouncer.call(value)

        assert calls == []
        assert debouncer.pending
        assert len(timers.timers) == 4
        assert len(timers.active) == 1

        timers.fire_all()

        assert calls == [3]
        assert not debouncer.pending

    def test_superseded_timer_does_not_run(self, timers):
        calls = []
        debouncer = Debouncer(0.3, calls.append, timers)

        debouncer.call("old")
        old_timer = timers.timers[0]
        debouncer.call("new")

        # Simulate the old timer racing past its cancel
        old_timer.cancelled = False
        old_timer.fire()

        assert calls == []
        timers.timers[1].fire()
        assert calls == ["new"]

    def test_flush_runs_pending_now(self, timers):
        calls = []
        debouncer = Debouncer(0.3, calls.append, timers)

        debouncer.call("a")
        debouncer.flush()
        debouncer.flush()

        assert calls == ["a"]
        assert timers.active == []

    def test_cancel_drops_pending(self, timers):
        calls = []
        debouncer = Debouncer(0.3, calls.append, timers)

        debouncer.call("a")
        debouncer.cancel()
        timers.fire_all()
        debouncer.flush()

        assert calls == []

    def test_zero_delay_runs_synchronously(self, timers):
        calls = []
        debouncer = Debouncer(0, calls.append, timers)

        debouncer.call("a")
        debouncer.call("b")

        assert calls == ["a", "b"]
        assert timers.timers == []

    def test_failing_action_is_logged(self, timers, caplog):
        def broken(_):
            raise RuntimeError("disk full")

        debouncer = Debouncer(0.3, broken, timers)
        debouncer.call("a")

        with caplog.at_level(logging.ERROR, logger="cart.debounce"):
            debouncer.flush()

        assert "Debounced action" in caplog.text

    def test_real_timer_fires_after_quiet_period(self):
        done = threading.Event()
        calls = []

        def action(value):
            calls.append(value)
            done.set()

        debouncer = Debouncer(0.05, action)
        debouncer.call(1)
        debouncer.call(2)

        assert done.wait(timeout=2)
        time.sleep(0.1)
        assert calls == [2]
