"""
Cart Persistence Module

Mirrors the cart snapshot into a single durable storage slot.

Loading is tolerant: missing optional fields are defaulted, but a blob that
does not parse as a list of line items (bad JSON, wrong shape, invalid entry,
duplicate ids) is discarded as a whole and the cart starts empty. Neither
load() nor save() raises; storage failures are logged and the in-memory cart
stays authoritative.
"""

import json
import logging
from typing import List

from pydantic import TypeAdapter, ValidationError

from .models import CartLineItem, CartSnapshot
from .storage import KeyValueStorage

logger = logging.getLogger(__name__)

_line_items = TypeAdapter(List[CartLineItem])


class CorruptCartError(ValueError):
    """Stored cart blob is not a valid list of line items."""


def dump_snapshot(snapshot: CartSnapshot) -> str:
    """Serialize a snapshot to the stored JSON format."""
    return json.dumps([item.to_record() for item in snapshot])


def parse_snapshot(data: str) -> CartSnapshot:
    """Parse a stored blob, raising CorruptCartError when it is unusable."""
    try:
        raw = json.loads(data)
    except (json.JSONDecodeError, TypeError) as e:
        raise CorruptCartError(f"Cart blob is not JSON: {e}") from e

    if not isinstance(raw, list):
        raise CorruptCartError(f"Cart blob must be a list, got {type(raw).__name__}")

    try:
        items = _line_items.validate_python(raw)
    except ValidationError as e:
        raise CorruptCartError(f"Cart blob has invalid line items: {e.error_count()} error(s)") from e

    ids = [item.id for item in items]
    if len(ids) != len(set(ids)):
        raise CorruptCartError("Cart blob has duplicate product ids")

    return tuple(items)


class CartPersistence:
    """Loads and saves cart snapshots under one storage key."""

    DEFAULT_KEY = "cart"

    def __init__(self, storage: KeyValueStorage, key: str = DEFAULT_KEY) -> None:
        self.storage = storage
        self.key = key

    def load(self) -> CartSnapshot:
        """Return the stored snapshot, or an empty one if it is missing or unusable."""
        try:
            data = self.storage.get(self.key)
        except Exception as e:
            logger.error(f"Failed to read cart from storage: {e}")
            return ()

        if not data:
            return ()

        try:
            snapshot = parse_snapshot(data)
        except CorruptCartError as e:
            logger.warning(f"Discarding stored cart under key {self.key!r}: {e}")
            return ()

        logger.info(f"Loaded cart with {len(snapshot)} item(s) from storage")
        return snapshot

    def save(self, snapshot: CartSnapshot) -> bool:
        """Write the snapshot. Returns False when the write failed."""
        try:
            self.storage.set(self.key, dump_snapshot(snapshot))
        except Exception as e:
            logger.error(f"Failed to save cart to storage: {e}")
            return False

        logger.debug(f"Saved cart with {len(snapshot)} item(s) to storage")
        return True
