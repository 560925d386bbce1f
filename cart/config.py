"""Configuration for the cart client."""

import os

from pydantic_settings import BaseSettings  # Configuration management


class CartSettings(BaseSettings):
    """Cart client settings."""

    service_name: str = os.getenv("CART_SERVICE_NAME", "cart-client")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    # Durable storage: "file" (local, survives restarts), "redis" or "memory"
    storage_backend: str = os.getenv("CART_STORAGE_BACKEND", "file")
    storage_dir: str = os.getenv("CART_STORAGE_DIR", ".cart")
    storage_key: str = os.getenv("CART_STORAGE_KEY", "cart")

    # Quiet period before a burst of mutations is written out
    debounce_seconds: float = float(os.getenv("CART_DEBOUNCE_SECONDS", "0.3"))

    redis_host: str = os.getenv("REDIS_HOST", "localhost")
    redis_port: int = int(os.getenv("REDIS_PORT", "6379"))
    redis_ttl: int = int(os.getenv("CART_REDIS_TTL", "86400"))  # 24 hours
