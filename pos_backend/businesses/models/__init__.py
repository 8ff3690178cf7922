# businesses/models/__init__.py

"""
BUSINESSES MODELS PACKAGE EXPORTS
"""

from .business import Business
from .payment_method import PaymentMethod

__all__ = [
    "Business",
    "PaymentMethod",
]
