# inventory/models/product.py

from .stock_item import StockItem


class Product(StockItem):
    """
    Finished good.

    Stock goes up via Production records and down via Invoice records.
    """
