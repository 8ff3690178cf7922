# sales/services/checkout_orchestrator.py

"""
CHECKOUT ORCHESTRATOR (APPLICATION SERVICE)

Purpose:
- Turn an in-memory cart plus a payment plan into a numbered, immutable Sale.
- Decrement inventory for the sold lines.

Pipeline:
    cart + plan -> breakdown -> order number + sale row (ONE transaction)
                -> inventory settlement (after commit) -> cart cleared

Hard rules:
- Money values are computed server-side from the cart snapshot.
- Order number reservation and the sale insert share one DB transaction:
  a failed insert gives the number back, a committed sale always has one.
- Once the sale is committed the checkout has succeeded. Settlement
  failures are reported (inventory_pending) but never undo the sale.
- The cart is cleared only after the sale is committed; any failure before
  that leaves it intact for a retry.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP

from django.db import DatabaseError, transaction

from sales.models import Sale

from .exceptions import (
    CheckoutValidationError,
    PersistenceError,
    SaleFailedError,
    SettlementError,
)
from .inventory_settlement import settle_sale_inventory
from .order_numbering import reserve_next_order_number
from .payment_plan import MAX_AMOUNT, PaymentPlan
from .sale_persistence import build_sale_items, commit_sale

logger = logging.getLogger(__name__)

TWOPLACES = Decimal("0.01")
ZERO = Decimal("0.00")


def _money(v) -> Decimal:
    if v is None or v == "":
        return ZERO
    return Decimal(str(v)).quantize(TWOPLACES, rounding=ROUND_HALF_UP)


@dataclass
class CheckoutOutcome:
    """
    Result of one checkout attempt.

    Exactly one of:
    - succeeded=True: sale recorded (inventory_pending says whether stock is late)
    - succeeded=False: nothing recorded, cart intact, error_code/message/retryable set
    """

    succeeded: bool
    sale: Sale | None = None
    order_number: str = ""
    total: Decimal = ZERO
    change: Decimal = ZERO
    inventory_pending: bool = False
    error_code: str = ""
    message: str = ""
    retryable: bool = False

    @classmethod
    def failed(cls, exc: SaleFailedError) -> "CheckoutOutcome":
        return cls(
            succeeded=False,
            error_code=exc.code,
            message=str(exc),
            retryable=exc.retryable,
        )


def _record_sale(*, business, user, line_items, breakdown) -> Sale:
    try:
        with transaction.atomic():
            order_number = reserve_next_order_number(business_id=business.id)
            return commit_sale(
                business=business,
                user=user,
                line_items=line_items,
                payment_breakdown=breakdown,
                order_number=order_number,
            )
    except DatabaseError as exc:
        # failures of the numbering UPDATE itself
        logger.exception(
            "Order number could not be reserved",
            extra={"business_id": str(business.id)},
        )
        raise PersistenceError("The sale could not be saved. Please try again.") from exc


def process_sale(*, business, user, cart, plan: PaymentPlan) -> CheckoutOutcome:
    """
    Run the pipeline. Raises SaleFailedError subclasses when no sale was recorded.
    """
    if cart.is_empty:
        raise CheckoutValidationError("Cart is empty")

    if cart.total() > MAX_AMOUNT:
        raise CheckoutValidationError(
            f"Cart total exceeds the maximum of {MAX_AMOUNT:.2f}."
        )

    cart_total = _money(cart.total())
    if _money(plan.total) != cart_total:
        raise CheckoutValidationError(
            f"Payment total {plan.total:.2f} does not match cart total {cart_total:.2f}."
        )

    breakdown = plan.to_breakdown()
    change = plan.change
    line_items = build_sale_items(cart.lines)

    sale = _record_sale(
        business=business,
        user=user,
        line_items=line_items,
        breakdown=breakdown,
    )

    # ---- committed: from here on the checkout has succeeded ----
    cart.clear()

    inventory_pending = False
    try:
        settle_sale_inventory(sale=sale)
    except SettlementError:
        inventory_pending = True
        logger.warning(
            "Sale recorded with inventory pending",
            extra={"sale_id": str(sale.id), "order_number": sale.order_number},
        )

    return CheckoutOutcome(
        succeeded=True,
        sale=sale,
        order_number=sale.order_number,
        total=sale.total,
        change=change,
        inventory_pending=inventory_pending,
    )


def checkout_cart(*, business, user, cart, plan: PaymentPlan) -> CheckoutOutcome:
    """
    Boundary: never raises for domain failures.
    Every failure maps to "sale failed, cart intact" or
    "sale succeeded, inventory may be delayed".
    """
    try:
        return process_sale(business=business, user=user, cart=cart, plan=plan)
    except SaleFailedError as exc:
        logger.info(
            "Checkout failed",
            extra={
                "business_id": str(getattr(business, "id", "")),
                "error_code": exc.code,
                "retryable": exc.retryable,
            },
        )
        return CheckoutOutcome.failed(exc)
