"""
logging_config.py - Centralized JSON Logging Configuration

PURPOSE:
    Provides structured JSON logging for the cart client and its collaborators
    (checkout, reorder) with timezone-aware timestamps and client context.

KEY FEATURES:
    - JSON Format: Every log line is one JSON object
    - Timezone Aware: Timestamps use the configured IANA zone (UTC by default) via ZoneInfo
    - Service Context: Automatically adds service_name to all log entries
    - Event Tracking: Optional event_type field for cart mutations (cart.item_added, ...)
    - Exception Handling: Full stack traces included in log entries

JSON LOG FIELDS:
    - timestamp: ISO 8601 format (e.g., "2026-10-18T14:02:11.001014+00:00")
    - level: Log level (INFO, ERROR, WARNING, DEBUG, CRITICAL)
    - logger: Module name where log originated (e.g., "cart.store")
    - message: The actual log message
    - service_name: Name of the client (injected automatically)
    - event_type: Optional cart event type
    - exception: Full stack trace (only when exc_info is set)

USAGE:
    from shared.logging_config import setup_logging
    setup_logging("cart-client", level="INFO")

    logger = logging.getLogger(__name__)
    logger.info("Added item p1 to cart", extra={"event_type": "cart.item_added"})

EXAMPLE JSON OUTPUT:
    {
        "timestamp": "2026-10-18T14:02:11.001014+00:00",
        "level": "INFO",
        "logger": "cart.store",
        "message": "Added item p1 to cart (quantity 1)",
        "service_name": "cart-client",
        "event_type": "cart.item_added"
    }
"""

import json
import logging
import sys
from datetime import datetime
from zoneinfo import ZoneInfo
from typing import Any, Dict, Optional, TextIO


class JsonFormatter(logging.Formatter):
    """Custom formatter that outputs JSON logs with cart context."""

    def __init__(self, tz: str = "UTC") -> None:
        super().__init__()
        self.tz = ZoneInfo(tz)

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        log_data: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, self.tz).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if hasattr(record, "service_name"):
            log_data["service_name"] = record.service_name
        if hasattr(record, "event_type"):
            log_data["event_type"] = record.event_type

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


class ServiceFilter(logging.Filter):
    """Stamps every record with the client's service name."""

    def __init__(self, service_name: str) -> None:
        super().__init__()
        self.service_name = service_name

    def filter(self, record: logging.LogRecord) -> bool:
        record.service_name = self.service_name
        return True


def setup_logging(
    service_name: str,
    level: str = "INFO",
    tz: str = "UTC",
    stream: Optional[TextIO] = None,
) -> logging.Handler:
    """Setup JSON logging for the client and return the installed handler."""
    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setFormatter(JsonFormatter(tz))
    # Filter on the handler so records from child loggers are stamped too
    handler.addFilter(ServiceFilter(service_name))

    logger = logging.getLogger()
    logger.setLevel(level.upper())
    logger.addHandler(handler)
    return handler
