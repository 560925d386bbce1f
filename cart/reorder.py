"""Adding products to the cart from a past order or a product page."""

import logging
from typing import Iterable, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel

from .models import Product
from .store import CartStore

logger = logging.getLogger(__name__)


class ReorderItem(BaseModel):
    """An item of a past order as offered for reorder."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    product_id: str
    product_name: str = ""
    original_price: float = Field(ge=0)
    current_price: float = Field(ge=0)
    requested_quantity: int = Field(ge=0)
    available_quantity: int = Field(ge=0)
    image_url: Optional[str] = None

    @property
    def has_price_changed(self) -> bool:
        return self.original_price != self.current_price

    @property
    def has_limited_stock(self) -> bool:
        return self.available_quantity < self.requested_quantity

    def to_product(self) -> Product:
        """Product at today's price, limited to what is in stock."""
        return Product(
            id=self.product_id,
            name=self.product_name,
            price=self.current_price,
            quantity=self.available_quantity,
            image_url=self.image_url,
        )


def add_reorder_items(store: CartStore, items: Iterable[ReorderItem]) -> int:
    """Add every reorder item that is in stock. Returns how many were added."""
    added = 0
    for item in items:
        if item.available_quantity <= 0:
            logger.info(f"Skipping reorder of {item.product_id}: out of stock")
            continue
        store.add_or_update(item.to_product())
        added += 1
    return added


def add_single(store: CartStore, product) -> None:
    """Add one unit of a product, as the product page's add-to-cart button does."""
    if isinstance(product, Mapping):
        store.add_or_update({**product, "quantity": 1})
        return

    try:
        product = Product.coerce(product)
    except ValidationError:
        # The store logs and ignores what it cannot read
        store.add_or_update(product)
        return
    store.add_or_update(product.model_copy(update={"quantity": 1}))
