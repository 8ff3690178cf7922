from .checkout_orchestrator import CheckoutOutcome, checkout_cart, process_sale
from .exceptions import (
    CheckoutError,
    CheckoutValidationError,
    PersistenceError,
    SaleFailedError,
    SequenceExhaustionError,
    SettlementError,
)

__all__ = [
    "CheckoutOutcome",
    "checkout_cart",
    "process_sale",
    "CheckoutError",
    "CheckoutValidationError",
    "PersistenceError",
    "SaleFailedError",
    "SequenceExhaustionError",
    "SettlementError",
]
