# inventory/services/stock_ledger.py

"""
======================================================
PATH: inventory/services/stock_ledger.py
======================================================
STOCK LEDGER (MATERIAL + PRODUCT)

Purpose:
- The ONLY sanctioned mutators of StockItem.stock_quantity.
- add_stock / reduce_stock / has_enough_stock for Material and Product alike.

Rules:
- Quantities are 2-place decimals, strictly positive for mutations.
- reduce_stock never lets stock go below zero (InsufficientStockError).
- Every mutation re-reads the row under select_for_update() and writes it
  back inside transaction.atomic, so concurrent transitions serialize on the row.
- The caller's instance is refreshed in place after each mutation.
"""

from __future__ import annotations

import logging
from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import transaction

from inventory.models import StockItem
from inventory.services.exceptions import InsufficientStockError
from inventory.services.quantities import check_stock_limit, to_non_negative, to_quantity

logger = logging.getLogger(__name__)


def _require_item(item) -> None:
    if item is None or not isinstance(item, StockItem) or not getattr(item, "pk", None):
        raise ValidationError("a saved Material or Product is required")


def _lock(item: StockItem) -> StockItem:
    return type(item).objects.select_for_update().get(pk=item.pk)


def _key(item: StockItem) -> tuple[str, int]:
    return (item._meta.label, item.pk)


@transaction.atomic
def lock_stock_items(*items):
    """
    Lock the given Material/Product rows and return fresh instances.

    - Rows are locked in a deterministic (model, pk) order to avoid deadlocks
      between transitions touching the same pair of rows.
    - The result keeps the argument order; None arguments stay None.
    - Two arguments pointing at the same row get the SAME fresh instance.

    Call this inside the caller's transaction.atomic block: the locks are
    held until the outermost block commits.
    """
    unique = {}
    for item in items:
        if item is None:
            continue
        _require_item(item)
        unique.setdefault(_key(item), item)

    locked = {key: _lock(unique[key]) for key in sorted(unique)}
    return [None if item is None else locked[_key(item)] for item in items]


def has_enough_stock(item: StockItem, quantity) -> bool:
    """Non-mutating check: current stock >= quantity."""
    _require_item(item)
    qty = to_non_negative(quantity, field_name="quantity")
    return item.has_enough_stock(qty)


def _write(item: StockItem, locked: StockItem, new_quantity: Decimal) -> StockItem:
    locked.stock_quantity = new_quantity
    locked.save(update_fields=["stock_quantity", "updated_at"])

    item.stock_quantity = locked.stock_quantity
    item.updated_at = locked.updated_at
    return item


@transaction.atomic
def add_stock(item: StockItem, quantity) -> StockItem:
    _require_item(item)
    qty = to_quantity(quantity, field_name="quantity")

    locked = _lock(item)
    before = Decimal(locked.stock_quantity)
    _write(item, locked, check_stock_limit(before + qty))

    logger.info(
        "Stock added",
        extra={"item": _key(item), "quantity": str(qty), "before": str(before), "after": str(item.stock_quantity)},
    )
    return item


@transaction.atomic
def reduce_stock(item: StockItem, quantity, *, label: str = "stock") -> StockItem:
    _require_item(item)
    qty = to_quantity(quantity, field_name="quantity")

    locked = _lock(item)
    before = Decimal(locked.stock_quantity)
    if before < qty:
        logger.warning(
            "Stock reduction rejected",
            extra={"item": _key(item), "available": str(before), "required": str(qty)},
        )
        raise InsufficientStockError(available=before, required=qty, label=label)

    _write(item, locked, before - qty)

    logger.info(
        "Stock reduced",
        extra={"item": _key(item), "quantity": str(qty), "before": str(before), "after": str(item.stock_quantity)},
    )
    return item
