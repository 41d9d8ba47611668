# inventory/models/material.py

from .stock_item import StockItem


class Material(StockItem):
    """
    Raw material (flour, sugar, oil, ...).

    Stock goes up via Incoming records and down via Production records.
    """
