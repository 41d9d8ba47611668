"""
PATH: inventory/models/__init__.py

Inventory models export surface.
"""

from .material import Material
from .product import Product
from .stock_item import StockItem, StockItemQuerySet

__all__ = [
    "Material",
    "Product",
    "StockItem",
    "StockItemQuerySet",
]
