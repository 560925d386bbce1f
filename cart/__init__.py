"""Cart package: models, storage, persistence and the observable cart store."""
from .channel import StateChannel, Subscription
from .config import CartSettings
from .models import CartLineItem, CartSnapshot, Product, total_items, total_price
from .persistence import CartPersistence
from .storage import FileStorage, InMemoryStorage, KeyValueStorage, RedisStorage, create_storage
from .store import CartStore

__all__ = [
    "CartLineItem",
    "CartPersistence",
    "CartSettings",
    "CartSnapshot",
    "CartStore",
    "FileStorage",
    "InMemoryStorage",
    "KeyValueStorage",
    "Product",
    "RedisStorage",
    "StateChannel",
    "Subscription",
    "create_storage",
    "total_items",
    "total_price",
]
