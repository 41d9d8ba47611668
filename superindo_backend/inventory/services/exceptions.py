# inventory/services/exceptions.py

"""
STOCK LEDGER ERRORS

Centralized domain errors for stock and master-data services.

Field-level input problems are NOT here: they are raised as
django.core.exceptions.ValidationError with a {field: message} payload.
"""

from __future__ import annotations

from decimal import Decimal


class StockLedgerError(Exception):
    """Base exception for all stock ledger failures."""


class InsufficientStockError(StockLedgerError):
    """
    Raised when a reduction (or a pre-check before one) needs more stock
    than is on hand.
    """

    def __init__(self, available, required, *, label: str = "stock", required_label: str = "Required"):
        self.available = Decimal(str(available))
        self.required = Decimal(str(required))
        self.label = label
        super().__init__(
            f"Insufficient {label}. Available: {self.available}, {required_label}: {self.required}"
        )


class ReferentialIntegrityError(Exception):
    """Raised when deleting a record that transaction rows still reference."""

    def __init__(self, message: str, *, related: dict | None = None):
        self.related = dict(related or {})
        super().__init__(message)
