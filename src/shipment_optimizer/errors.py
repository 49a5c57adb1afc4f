"""Exceptions raised by the shipment optimizer."""

from __future__ import annotations

from typing import Any


class ItemValidationError(ValueError):
    """Input payload has a missing, non-numeric or out-of-range field."""

    def __init__(self, message: str, errors: list[dict[str, Any]] | None = None):
        super().__init__(message)
        self.errors = errors or []


class PackingError(RuntimeError):
    """No catalog box nor the custom fallback box can hold a remaining item."""

    def __init__(self, message: str, item_id: str | None = None):
        super().__init__(message)
        self.item_id = item_id


class RateProviderError(RuntimeError):
    """Rate provider failed to return quotes."""
