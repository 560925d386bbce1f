"""Trailing-edge debounce built on cancellable timers."""

import logging
import threading
from typing import Any, Callable, Optional, Tuple

logger = logging.getLogger(__name__)


class Debouncer:
    """
    Coalesces bursts of calls into a single deferred action.

    Each call() cancels the pending timer and arms a new one with the latest
    arguments, so only the call that survives `delay` seconds of quiet runs.
    A delay of 0 runs the action immediately on the calling thread.

    Actions never overlap, and an action whose call was superseded by one
    that already ran is skipped, so the last action to finish always carries
    the newest arguments.

    `timer_factory` must build an object with start() and cancel() from
    (delay, function), which threading.Timer does.
    """

    def __init__(
        self,
        delay: float,
        action: Callable[..., Any],
        timer_factory: Callable[[float, Callable[[], None]], Any] = threading.Timer,
    ) -> None:
        self.delay = delay
        self.action = action
        self._timer_factory = timer_factory
        self._timer = None
        self._args: Optional[Tuple[Any, ...]] = None
        self._generation = 0
        self._last_run = 0
        self._lock = threading.Lock()
        self._run_lock = threading.Lock()

    @property
    def pending(self) -> bool:
        return self._args is not None

    def call(self, *args: Any) -> None:
        if self.delay <= 0:
            with self._lock:
                self._take_pending()
                self._generation += 1
                generation = self._generation
            self._run(generation, args)
            return

        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            self._args = args
            self._generation += 1
            generation = self._generation
            timer = self._timer_factory(self.delay, lambda: self._fire(generation))
            if isinstance(timer, threading.Thread):
                timer.daemon = True
            self._timer = timer
        timer.start()

    def flush(self) -> None:
        """Run the pending action now, if any."""
        with self._lock:
            generation = self._generation
            args = self._take_pending()
        if args is not None:
            self._run(generation, args)

    def cancel(self) -> None:
        """Drop the pending action without running it."""
        with self._lock:
            self._take_pending()

    def _fire(self, generation: int) -> None:
        with self._lock:
            # A timer superseded while it was already firing must not run
            if generation != self._generation:
                return
            args = self._take_pending()
        if args is not None:
            self._run(generation, args)

    def _take_pending(self) -> Optional[Tuple[Any, ...]]:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        args, self._args = self._args, None
        return args

    def _run(self, generation: int, args: Tuple[Any, ...]) -> None:
        with self._run_lock:
            if generation <= self._last_run:
                return
            self._last_run = generation
            try:
                self.action(*args)
            except Exception:
                logger.exception("Debounced action %r failed", self.action)
