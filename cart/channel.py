"""
Observable state channel.

A StateChannel always holds a current value. Subscribers get that value
immediately on subscribe and then every value pushed with next(). Derived
channels created with map() recompute from each upstream value.

    channel = StateChannel(0)
    doubled = channel.map(lambda v: v * 2)
    sub = doubled.subscribe(print)   # prints 0
    channel.next(21)                 # prints 42
    sub.unsubscribe()
"""

import logging
import threading
from collections import deque
from typing import Callable, Deque, Generic, List, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")


class Subscription:
    """Handle returned by StateChannel.subscribe."""

    def __init__(self, channel: "StateChannel", callback: Callable) -> None:
        self._channel = channel
        self._callback = callback
        self.closed = False

    def unsubscribe(self) -> None:
        if self.closed:
            return
        self.closed = True
        self._channel._detach(self._callback)


class StateChannel(Generic[T]):
    """Publish/subscribe channel that replays its current value."""

    def __init__(self, initial: T) -> None:
        self._value = initial
        self._subscribers: List[Callable[[T], None]] = []
        self._queue: Deque[T] = deque()
        self._delivering = False
        self._lock = threading.RLock()

    @property
    def value(self) -> T:
        return self._value

    def subscribe(self, callback: Callable[[T], None]) -> Subscription:
        with self._lock:
            self._subscribers.append(callback)
            value = self._value
        self._deliver(callback, value)
        return Subscription(self, callback)

    def next(self, value: T) -> None:
        with self._lock:
            self._value = value
            self._queue.append(value)
            # Values pushed from inside a callback are delivered by the running loop, in order
            if self._delivering:
                return
            self._delivering = True

        try:
            while True:
                with self._lock:
                    if not self._queue:
                        self._delivering = False
                        return
                    value = self._queue.popleft()
                    subscribers = list(self._subscribers)
                for callback in subscribers:
                    self._deliver(callback, value)
        except BaseException:
            with self._lock:
                self._queue.clear()
                self._delivering = False
            raise

    def map(self, fn: Callable[[T], R]) -> "StateChannel[R]":
        """Create a channel whose value is always fn(upstream value)."""
        derived: StateChannel[R] = StateChannel(fn(self._value))
        # First delivery replays the value the derived channel already holds
        self.subscribe(lambda value: derived.next(fn(value)))
        return derived

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def _detach(self, callback: Callable[[T], None]) -> None:
        with self._lock:
            try:
                self._subscribers.remove(callback)
            except ValueError:
                pass

    @staticmethod
    def _deliver(callback: Callable[[T], None], value: T) -> None:
        try:
            callback(value)
        except Exception:
            logger.exception("Cart subscriber %r failed", callback)
