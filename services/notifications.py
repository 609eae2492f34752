"""
Notification sinks for user facing cart messages.
Fire and forget: reporting never fails the cart operation that triggered it.
"""
from typing import Protocol

import structlog

logger = structlog.get_logger(__name__)

# User facing messages, one per failure condition
OUT_OF_STOCK_MESSAGE = "Requested quantity unavailable"
ADD_FAILED_MESSAGE = "Failed to add product"
REMOVE_FAILED_MESSAGE = "Failed to remove product"
UPDATE_FAILED_MESSAGE = "Failed to update product quantity"


class Notifier(Protocol):
    def report(self, message: str, severity: str = "error") -> None:
        ...


class LogNotifier:
    """Reports messages through the service log."""

    def report(self, message: str, severity: str = "error") -> None:
        if severity == "error":
            logger.error("cart_notification", message=message)
        else:
            logger.info("cart_notification", message=message, severity=severity)

