"""
Cart Storage Module

Durable key-value slots that back the cart across sessions. Every backend
offers the same synchronous get/set/delete of a string blob.

Backends:
    - InMemoryStorage: dict-backed, lives as long as the process
    - FileStorage: one "<key>.json" file per key in a directory (local, like
      a browser's localStorage)
    - RedisStorage: "cart:{key}" keys in Redis, expiring after a TTL that
      resets on every write

Example Usage:
    ```python
    redis_client = redis.Redis(host="localhost", port=6379, decode_responses=True)
    storage = RedisStorage(redis_client)
    storage.set("cart", '[{"id": "p1", "price": 10.0, "quantity": 1}]')
    storage.get("cart")
    ```
"""

import logging
import os
import tempfile
from pathlib import Path
from typing import Dict, Optional, Protocol

import redis

from .config import CartSettings

logger = logging.getLogger(__name__)


class KeyValueStorage(Protocol):
    """Synchronous string slot storage."""

    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str) -> None: ...

    def delete(self, key: str) -> None: ...


class InMemoryStorage:
    """Dict-backed storage, mostly for tests and throwaway sessions."""

    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        self.data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value

    def delete(self, key: str) -> None:
        self.data.pop(key, None)


class FileStorage:
    """Stores each key as a JSON file inside `directory`."""

    def __init__(self, directory: str) -> None:
        self.directory = Path(directory)

    def _path(self, key: str) -> Path:
        return self.directory / f"{key}.json"

    def get(self, key: str) -> Optional[str]:
        path = self._path(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def set(self, key: str, value: str) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        # Write to a sibling temp file and swap it in so readers never see a partial blob
        fd, tmp_path = tempfile.mkstemp(dir=self.directory, prefix=f".{key}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(value)
            os.replace(tmp_path, self._path(key))
        except BaseException:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise

    def delete(self, key: str) -> None:
        self._path(key).unlink(missing_ok=True)


class RedisStorage:
    """Storage backed by a synchronous Redis client."""

    KEY_PREFIX = "cart:"
    # Abandoned carts expire after a day of inactivity; every write resets the TTL
    DEFAULT_TTL = 86400  # 24 hours

    def __init__(
        self,
        redis_client: redis.Redis,
        prefix: str = KEY_PREFIX,
        ttl: Optional[int] = DEFAULT_TTL,
    ) -> None:
        self.redis = redis_client
        self.prefix = prefix
        self.ttl = ttl

    def _key(self, key: str) -> str:
        return f"{self.prefix}{key}"

    def get(self, key: str) -> Optional[str]:
        value = self.redis.get(self._key(key))
        if isinstance(value, bytes):
            return value.decode("utf-8")
        return value

    def set(self, key: str, value: str) -> None:
        if self.ttl:
            self.redis.set(self._key(key), value, ex=self.ttl)
        else:
            self.redis.set(self._key(key), value)

    def delete(self, key: str) -> None:
        self.redis.delete(self._key(key))


def create_storage(settings: CartSettings) -> KeyValueStorage:
    """Build the storage backend named by settings.storage_backend."""
    backend = settings.storage_backend.lower()

    if backend == "memory":
        return InMemoryStorage()
    if backend == "file":
        return FileStorage(settings.storage_dir)
    if backend == "redis":
        redis_client = redis.Redis(
            host=settings.redis_host,
            port=settings.redis_port,
            decode_responses=True,
        )
        logger.info(f"Using Redis cart storage at {settings.redis_host}:{settings.redis_port}")
        return RedisStorage(redis_client, ttl=settings.redis_ttl)

    raise ValueError(f"Unknown cart storage backend: {settings.storage_backend!r}")
