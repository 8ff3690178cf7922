from .cart import (
    AddCartItemInputSerializer,
    CartItemNoteInputSerializer,
    CartLineSerializer,
    CartSerializer,
    UpdateCartItemInputSerializer,
)
from .checkout import (
    CheckoutResultSerializer,
    PaymentPlanInputSerializer,
    PaymentPlanStateSerializer,
    SplitSlotInputSerializer,
)

__all__ = [
    "AddCartItemInputSerializer",
    "CartItemNoteInputSerializer",
    "CartLineSerializer",
    "CartSerializer",
    "UpdateCartItemInputSerializer",
    "CheckoutResultSerializer",
    "PaymentPlanInputSerializer",
    "PaymentPlanStateSerializer",
    "SplitSlotInputSerializer",
]
