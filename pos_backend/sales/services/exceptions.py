# sales/services/exceptions.py

"""
CHECKOUT SERVICE ERRORS

Taxonomy:
- SaleFailedError: nothing was recorded, the cart is left untouched.
    - CheckoutValidationError   (local, operator corrects and retries)
    - SequenceExhaustionError   (configuration problem, administrator must act)
    - PersistenceError          (retryable)
- SettlementError: the sale IS recorded, only the stock decrement is pending.
"""


class CheckoutError(Exception):
    """Base exception for all checkout pipeline failures."""

    code = "CHECKOUT_FAILED"
    retryable = False


class SaleFailedError(CheckoutError):
    """Raised when no sale was recorded."""


class CheckoutValidationError(SaleFailedError):
    """Raised when the cart or payment plan cannot be submitted."""

    code = "INVALID_PAYMENT"


class SequenceExhaustionError(SaleFailedError):
    """Raised when a business has no usable order sequence."""

    code = "ORDER_SEQUENCE_UNAVAILABLE"


class PersistenceError(SaleFailedError):
    """Raised when the sale (or its order number) could not be written."""

    code = "PERSISTENCE_FAILED"
    retryable = True


class SettlementError(CheckoutError):
    """Raised when stock could not be decremented for an already recorded sale."""

    code = "INVENTORY_PENDING"
    retryable = True

    def __init__(self, message: str, *, sale_id=None):
        super().__init__(message)
        self.sale_id = sale_id
