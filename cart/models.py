"""
Cart Models Module

Pydantic models for the products handed to the cart and the line items it holds.

Data Format (durable storage):
    '[{"id": "p1", "name": "Laptop", "description": "", "price": 999.99,
       "quantity": 2, "sellerName": "acme", "userId": "u1",
       "imageMediaIds": ["m1"], "imageUrl": null}]'

Both models accept camelCase keys (as stored and as sent by the catalog API)
as well as snake_case field names.
"""

from typing import Any, List, Mapping, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

DISPLAY_FIELDS = ("name", "description", "seller_name", "user_id")


class Product(BaseModel):
    """Catalog product as handed to the cart. `quantity` is the amount to add."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, coerce_numbers_to_str=True, extra="ignore"
    )

    id: Optional[str] = None
    name: str = ""
    description: str = ""
    price: float = Field(default=0.0, ge=0)
    quantity: int = 0
    seller_name: str = ""
    user_id: str = ""
    image_media_ids: List[str] = Field(default_factory=list)
    image_url: Optional[str] = None

    # Catalog DTOs send null for unset display fields
    @field_validator(*DISPLAY_FIELDS, mode="before")
    @classmethod
    def default_display_fields(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("image_media_ids", mode="before")
    @classmethod
    def default_image_media_ids(cls, value: Any) -> Any:
        return [] if value is None else value

    @classmethod
    def coerce(cls, value: Any) -> "Product":
        """Build a Product from a Product, a mapping or an object with matching attributes."""
        if isinstance(value, cls):
            return value
        if isinstance(value, Mapping):
            return cls.model_validate(dict(value))
        return cls.model_validate(value, from_attributes=True)


class CartLineItem(BaseModel):
    """One distinct product held in the cart."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, frozen=True, extra="ignore"
    )

    id: str = Field(min_length=1)
    name: str = ""
    description: str = ""
    price: float = Field(ge=0)
    quantity: int = Field(gt=0)
    seller_name: str = ""
    user_id: str = ""
    image_media_ids: Tuple[str, ...] = ()
    image_url: Optional[str] = None

    @field_validator(*DISPLAY_FIELDS, mode="before")
    @classmethod
    def default_display_fields(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("image_media_ids", mode="before")
    @classmethod
    def default_image_media_ids(cls, value: Any) -> Any:
        return [] if value is None else value

    @classmethod
    def from_product(cls, product: Product, quantity: int) -> "CartLineItem":
        """Clone the product's display fields into a new line item."""
        return cls(
            id=product.id,
            name=product.name,
            description=product.description,
            price=product.price,
            quantity=quantity,
            seller_name=product.seller_name,
            user_id=product.user_id,
            image_media_ids=tuple(product.image_media_ids),
            image_url=product.image_url,
        )

    @property
    def line_total(self) -> float:
        return self.price * self.quantity

    def with_quantity(self, quantity: int) -> "CartLineItem":
        return self.model_copy(update={"quantity": quantity})

    def to_record(self) -> dict:
        """Serialize for durable storage."""
        return self.model_dump(by_alias=True, mode="json")


# Immutable point-in-time copy of the cart
CartSnapshot = Tuple[CartLineItem, ...]


def total_items(snapshot: CartSnapshot) -> int:
    """Sum of quantities across the snapshot."""
    return sum(item.quantity for item in snapshot)


def total_price(snapshot: CartSnapshot) -> float:
    """Sum of price * quantity across the snapshot."""
    return sum((item.line_total for item in snapshot), 0.0)
