"""
Checkout Module

Turns the current cart into an order submission and clears the cart once the
order has been accepted.

Flow:
    1. Shipping details are validated (ShippingDetails)
    2. The cart snapshot becomes a CreateOrderRequest (product id + quantity
       per line item)
    3. The injected submitter sends it to the order backend
    4. On success the cart is cleared; on failure it is left intact so the
       user can retry

Example Usage:
    ```python
    checkout = CheckoutService(store, submit_order=order_client.create_order)
    details = ShippingDetails(
        full_name="Ada Lovelace",
        email="ada@example.com",
        phone="+447700900123",
        address="12 Analytical Row",
        city="London",
        postal_code="N1 9GU",
    )
    order = checkout.place_order(details)
    ```
"""

import logging
from typing import Any, Callable, List

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from .models import CartSnapshot
from .store import CartStore

logger = logging.getLogger(__name__)


class CheckoutError(Exception):
    """Base class for checkout failures."""


class EmptyCartError(CheckoutError):
    """Raised when checking out an empty cart."""


class OrderSubmissionError(CheckoutError):
    """Raised when the order backend rejected or failed the submission."""


class ShippingDetails(BaseModel):
    """Buyer contact and delivery details collected on the checkout form."""

    full_name: str = Field(min_length=2)
    email: str = Field(pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
    phone: str = Field(pattern=r"^[0-9+]{8,15}$")
    address: str = Field(min_length=5)
    city: str = Field(min_length=1)
    postal_code: str = Field(min_length=1)
    payment_method: str = "cod"  # cash on delivery


class OrderItem(BaseModel):
    """Order line sent to the backend."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    product_id: str
    quantity: int = Field(gt=0)


class CreateOrderRequest(BaseModel):
    """Request body for creating an order."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    email: str
    international_phone: str
    full_name: str
    address: str
    city: str
    postal_code: str
    order_items: List[OrderItem]

    def to_payload(self) -> dict:
        return self.model_dump(by_alias=True)


def build_order_request(snapshot: CartSnapshot, details: ShippingDetails) -> CreateOrderRequest:
    """Build the order submission for a cart snapshot."""
    return CreateOrderRequest(
        email=details.email,
        international_phone=details.phone,
        full_name=details.full_name,
        address=details.address,
        city=details.city,
        postal_code=details.postal_code,
        order_items=[OrderItem(product_id=item.id, quantity=item.quantity) for item in snapshot],
    )


class CheckoutService:
    """Places orders from the cart and clears it on success."""

    def __init__(self, store: CartStore, submit_order: Callable[[CreateOrderRequest], Any]) -> None:
        self.store = store
        self.submit_order = submit_order

    def total(self) -> float:
        return self.store.total_price.value

    def place_order(self, details: ShippingDetails) -> Any:
        snapshot = self.store.snapshot
        if not snapshot:
            raise EmptyCartError("Cart is empty")

        request = build_order_request(snapshot, details)
        logger.info(
            f"Placing order for {len(request.order_items)} item(s), total {self.total():.2f}",
            extra={"event_type": "cart.checkout_initiated"},
        )

        try:
            result = self.submit_order(request)
        except Exception as e:
            logger.error(f"Order submission failed: {e}")
            raise OrderSubmissionError(str(e)) from e

        # Only a confirmed order empties the cart
        self.store.clear()
        logger.info("Order placed, cart cleared")
        return result
