"""Pytest configuration and fixtures"""
import pytest
from typing import Callable, List

from cart.persistence import CartPersistence
from cart.storage import InMemoryStorage
from cart.store import CartStore


class ManualTimer:
    """Stand-in for threading.Timer that only fires when told to."""

    def __init__(self, delay: float, function: Callable[[], None]):
        self.delay = delay
        self.function = function
        self.started = False
        self.cancelled = False

    def start(self) -> None:
        self.started = True

    def cancel(self) -> None:
        self.cancelled = True

    def fire(self) -> None:
        if self.started and not self.cancelled:
            self.function()


class ManualTimerFactory:
    """Timer factory that keeps every timer it builds."""

    def __init__(self):
        self.timers: List[ManualTimer] = []

    def __call__(self, delay: float, function: Callable[[], None]) -> ManualTimer:
        timer = ManualTimer(delay, function)
        self.timers.append(timer)
        return timer

    @property
    def active(self) -> List[ManualTimer]:
        return [t for t in self.timers if t.started and not t.cancelled]

    def fire_all(self) -> None:
        for timer in self.active:
            timer.fire()


class RecordingStorage(InMemoryStorage):
    """In-memory storage that counts writes."""

    def __init__(self, initial=None):
        super().__init__(initial)
        self.writes: List[str] = []

    def set(self, key: str, value: str) -> None:
        self.writes.append(value)
        super().set(key, value)


@pytest.fixture
def timers():
    """Manual timer factory"""
    return ManualTimerFactory()


@pytest.fixture
def storage():
    """Recording in-memory storage"""
    return RecordingStorage()


@pytest.fixture
def persistence(storage):
    """Persistence on the recording storage"""
    return CartPersistence(storage, key="cart")


@pytest.fixture
def store(persistence, timers):
    """Cart store with manually driven debounce timers"""
    return CartStore(persistence, debounce_seconds=0.3, timer_factory=timers)


@pytest.fixture
def make_store(timers):
    """Build a store over a given storage"""
    def _make(storage, key: str = "cart") -> CartStore:
        return CartStore(CartPersistence(storage, key=key), debounce_seconds=0.3, timer_factory=timers)
    return _make


@pytest.fixture
def sample_product():
    """Sample catalog product, as returned by the products API"""
    return {
        "id": "product-123",
        "name": "Mechanical Keyboard",
        "description": "Tenkeyless, brown switches",
        "price": 89.5,
        "quantity": 1,
        "sellerName": "keys-r-us",
        "userId": "seller-42",
        "imageMediaIds": ["media-1", "media-2"],
        "imageUrl": "https://cdn.example.com/kb.png",
    }
