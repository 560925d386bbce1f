"""
app.py - Cart client bootstrap

Creates the one cart store the client shares between its screens (cart page,
navigation badge, checkout) and owns its lifecycle:

    1. Startup: configure logging, open the configured storage backend and
       load the persisted cart
    2. Shutdown: flush any pending debounced write

USAGE:
    with cart_session() as store:
        store.add_or_update({"id": "p1", "price": 10, "quantity": 1})
"""

import logging
from contextlib import contextmanager
from typing import Iterator, Optional

from shared.logging_config import setup_logging

from .config import CartSettings
from .store import CartStore

logger = logging.getLogger(__name__)


def create_cart_store(settings: Optional[CartSettings] = None, configure_logging: bool = True) -> CartStore:
    """Build the app-lifetime cart store."""
    settings = settings or CartSettings()
    if configure_logging:
        setup_logging(settings.service_name, level=settings.log_level)

    logger.info(f"Starting cart store ({settings.storage_backend} storage)...")
    store = CartStore.from_settings(settings)
    logger.info(f"Cart store ready with {len(store.snapshot)} item(s)")
    return store


@contextmanager
def cart_session(settings: Optional[CartSettings] = None, configure_logging: bool = True) -> Iterator[CartStore]:
    """Yield the cart store and flush it on exit."""
    store = create_cart_store(settings, configure_logging=configure_logging)
    try:
        yield store
    finally:
        logger.info("Shutting down cart store...")
        store.close()
