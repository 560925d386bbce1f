"""
Cart Store Module

The client-side shopping cart: a single source of truth for the user's
in-progress cart, shared by the cart page, navigation badge and checkout.

Key Features:
    - At most one line item per product id; adding an existing product merges
      quantities instead of appending
    - Quantity floor: an item whose quantity would drop to zero or below is
      removed, never stored
    - Reactive reads: `cart` replays the current snapshot to new subscribers,
      `total_items` and `total_price` are derived from it
    - Debounced persistence: a burst of mutations is written once after a
      short quiet period (0.3s by default)
    - Fail soft: corrupt storage loads as an empty cart, write failures and
      bad input are logged, nothing is raised to the caller

Example Usage:
    ```python
    store = CartStore(CartPersistence(FileStorage(".cart")))
    store.total_price.subscribe(lambda total: print(f"Total: {total:.2f}"))

    store.add_or_update({"id": "p1", "name": "Laptop", "price": 999.99, "quantity": 1})
    store.add_or_update({"id": "p1", "price": 999.99}, increment=True)   # quantity 2
    store.add_or_update({"id": "p1", "price": 999.99}, increment=False)  # quantity 1
    store.remove("p1")
    store.close()
    ```
"""

import logging
import threading
from typing import Any, Callable, Optional

from pydantic import ValidationError

from .channel import StateChannel
from .config import CartSettings
from .debounce import Debouncer
from .models import CartLineItem, CartSnapshot, Product, total_items, total_price
from .persistence import CartPersistence
from .storage import create_storage

logger = logging.getLogger(__name__)


class CartStore:
    """Observable shopping cart with debounced durable persistence."""

    DEFAULT_DEBOUNCE_SECONDS = 0.3

    def __init__(
        self,
        persistence: CartPersistence,
        debounce_seconds: float = DEFAULT_DEBOUNCE_SECONDS,
        timer_factory: Optional[Callable[..., Any]] = None,
    ) -> None:
        self.persistence = persistence
        self._lock = threading.RLock()
        self._closed = False

        self.cart: StateChannel[CartSnapshot] = StateChannel(persistence.load())
        self.total_items: StateChannel[int] = self.cart.map(total_items)
        self.total_price: StateChannel[float] = self.cart.map(total_price)

        self._writer = Debouncer(
            debounce_seconds, persistence.save, timer_factory or threading.Timer
        )

    @classmethod
    def from_settings(cls, settings: Optional[CartSettings] = None) -> "CartStore":
        """Build a store on the storage backend named in the settings."""
        settings = settings or CartSettings()
        persistence = CartPersistence(create_storage(settings), key=settings.storage_key)
        return cls(persistence, debounce_seconds=settings.debounce_seconds)

    @property
    def snapshot(self) -> CartSnapshot:
        """Current cart contents."""
        return self.cart.value

    def add_or_update(self, product: Any, increment: Optional[bool] = None) -> None:
        """
        Add a product or adjust the quantity of the matching line item.

        With `increment` omitted the product's `quantity` is added (any sign);
        True/False step the existing item by +1/-1. Items reaching a quantity
        of zero or less are removed.
        """
        try:
            product = Product.coerce(product)
        except ValidationError as e:
            logger.warning(f"Ignoring invalid product for cart: {e.error_count()} error(s)")
            self._publish(self.snapshot)
            return

        if not product.id:
            logger.warning("Ignoring product without an id")
            self._publish(self.snapshot)
            return

        with self._lock:
            current = self.snapshot
            index = next((i for i, item in enumerate(current) if item.id == product.id), None)

            if index is None:
                quantity = self._initial_quantity(product, increment)
                if quantity <= 0:
                    logger.info(f"Not adding item {product.id}: quantity {quantity} is not positive")
                    self._publish(current)
                    return
                updated = current + (CartLineItem.from_product(product, quantity),)
                self._publish(updated)
                logger.info(
                    f"Added item {product.id} to cart (quantity {quantity})",
                    extra={"event_type": "cart.item_added"},
                )
                return

            existing = current[index]
            if increment is None:
                quantity = existing.quantity + product.quantity
            else:
                quantity = existing.quantity + (1 if increment else -1)

            if quantity <= 0:
                self.remove(product.id)
                return

            updated = current[:index] + (existing.with_quantity(quantity),) + current[index + 1:]
            self._publish(updated)
            logger.info(
                f"Updated item {product.id} quantity to {quantity}",
                extra={"event_type": "cart.item_updated"},
            )

    def remove(self, product_id: str) -> None:
        """Remove the line item with the given id, if present."""
        with self._lock:
            current = self.snapshot
            updated = tuple(item for item in current if item.id != product_id)
            self._publish(updated)

        if len(updated) != len(current):
            logger.info(
                f"Removed item {product_id} from cart",
                extra={"event_type": "cart.item_removed"},
            )

    def clear(self) -> None:
        """Empty the cart, e.g. after an order was confirmed."""
        with self._lock:
            self._publish(())
        logger.info("Cleared cart", extra={"event_type": "cart.cleared"})

    def flush(self) -> None:
        """Write any pending snapshot to storage now."""
        self._writer.flush()

    def close(self) -> None:
        """Flush pending writes and stop persisting further changes."""
        with self._lock:
            self._closed = True
        self._writer.flush()

    def __enter__(self) -> "CartStore":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    @staticmethod
    def _initial_quantity(product: Product, increment: Optional[bool]) -> int:
        if increment is None:
            return product.quantity
        # Stepping up an item that is not in the cart yet starts it at one
        return 1 if increment else 0

    def _publish(self, snapshot: CartSnapshot) -> None:
        self.cart.next(snapshot)
        if not self._closed:
            self._writer.call(snapshot)
