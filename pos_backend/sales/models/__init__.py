# sales/models/__init__.py

"""
SALES MODELS PACKAGE EXPORTS

Purpose:
- Central export surface for sales app models.
"""

from .order_sequence import OrderSequence
from .sale import Sale

__all__ = [
    "OrderSequence",
    "Sale",
]
