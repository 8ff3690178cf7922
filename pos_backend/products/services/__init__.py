from .catalog import ProductNotFound, ProductSnapshot, get_product
from .inventory import StockUpdate, decrement_stock

__all__ = [
    "ProductNotFound",
    "ProductSnapshot",
    "get_product",
    "StockUpdate",
    "decrement_stock",
]
