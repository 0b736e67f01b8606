from __future__ import annotations


class StoreCreditError(Exception):
    """Base exception for all store-credit service errors."""


class ConfigurationError(StoreCreditError):
    """Invalid or unreadable store-credit configuration."""


class OrderNotFoundError(StoreCreditError):
    """No order exists for the requested order number."""

    def __init__(self, order_number: str) -> None:
        super().__init__(f"order not found: {order_number}")
        self.order_number = order_number
