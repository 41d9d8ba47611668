from .catalog import (
    create_material,
    create_product,
    delete_material,
    delete_product,
    update_material,
    update_product,
)
from .exceptions import InsufficientStockError, ReferentialIntegrityError, StockLedgerError
from .stock_ledger import add_stock, has_enough_stock, lock_stock_items, reduce_stock

__all__ = [
    "add_stock",
    "reduce_stock",
    "has_enough_stock",
    "lock_stock_items",
    "create_material",
    "update_material",
    "delete_material",
    "create_product",
    "update_product",
    "delete_product",
    "InsufficientStockError",
    "ReferentialIntegrityError",
    "StockLedgerError",
]
