"""Exceptions raised by request validation and the metrics store."""

from __future__ import annotations

from typing import Any


class TicketMetricsError(Exception):
    """Base exception for ticket metrics errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)


class RequestValidationError(TicketMetricsError):
    def __init__(self, errors: list[str]):
        self.errors = list(errors)
        super().__init__("Invalid request format", {"errors": self.errors})


class MetricsStoreError(TicketMetricsError):
    """A store operation failed. ``code`` is the store's error code."""

    retryable = False

    def __init__(
        self,
        message: str,
        table_name: str,
        code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        self.table_name = table_name
        self.code = code
        super().__init__(message, details or {"table_name": table_name, "code": code})


class StoreNotFoundError(MetricsStoreError):
    """Target table does not exist."""


class CapacityExceededError(MetricsStoreError):
    """Write capacity exhausted; safe to retry with backoff."""

    retryable = True


class StoreValidationError(MetricsStoreError):
    """The store rejected the item or expression."""
