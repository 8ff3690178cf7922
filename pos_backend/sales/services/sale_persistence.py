# sales/services/sale_persistence.py

"""
SALE PERSISTENCE

Purpose:
- Freeze cart lines into value snapshots and write the immutable Sale row.

GUARANTEES:
- Line items are copies (name and price at the time of sale), in cart order.
- subtotal = sum(line totals); discount = 0.00; total = subtotal - discount.
- payment_method is the first method's code; payment_details is the full breakdown.
- A database failure raises PersistenceError and leaves nothing behind.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable

from django.db import DatabaseError, transaction

from sales.models import Sale

from .exceptions import CheckoutValidationError, PersistenceError
from .payment_plan import PaymentBreakdown

logger = logging.getLogger(__name__)

TWOPLACES = Decimal("0.01")
ZERO = Decimal("0.00")


def _money(value) -> Decimal:
    return Decimal(str(value)).quantize(TWOPLACES, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class SaleLineItem:
    product_id: str
    product_name: str
    quantity: int
    unit_price: Decimal
    notes: str = ""

    @property
    def total(self) -> Decimal:
        return _money(self.unit_price * self.quantity)

    def to_dict(self) -> dict:
        return {
            "product_id": self.product_id,
            "product_name": self.product_name,
            "quantity": self.quantity,
            "unit_price": f"{self.unit_price:.2f}",
            "total": f"{self.total:.2f}",
            "notes": self.notes,
        }


def build_sale_items(lines: Iterable) -> list[SaleLineItem]:
    """Snapshot cart lines (anything with product_id/name/unit_price/quantity/note)."""
    items = []
    for line in lines:
        items.append(
            SaleLineItem(
                product_id=str(line.product_id),
                product_name=line.name,
                quantity=int(line.quantity),
                unit_price=_money(line.unit_price),
                notes=line.note or "",
            )
        )
    return items


def commit_sale(
    *,
    business,
    user,
    line_items: list[SaleLineItem],
    payment_breakdown: PaymentBreakdown,
    order_number: str,
) -> Sale:
    if not line_items:
        raise CheckoutValidationError("Cart is empty")

    subtotal = sum((li.total for li in line_items), ZERO)
    discount = ZERO
    total = subtotal - discount

    try:
        with transaction.atomic():
            sale = Sale.objects.create(
                business=business,
                user=user if getattr(user, "is_authenticated", False) else None,
                order_number=order_number,
                items=[li.to_dict() for li in line_items],
                subtotal=subtotal,
                discount=discount,
                total=total,
                payment_method=payment_breakdown.primary_code,
                payment_details=payment_breakdown.to_dict(),
                status=Sale.STATUS_COMPLETED,
                order_type=Sale.ORDER_TYPE_COUNTER,
            )
    except DatabaseError as exc:
        logger.exception(
            "Sale could not be persisted",
            extra={
                "business_id": str(getattr(business, "id", business)),
                "order_number": order_number,
            },
        )
        raise PersistenceError("The sale could not be saved. Please try again.") from exc

    logger.info(
        "Sale committed",
        extra={
            "sale_id": str(sale.id),
            "order_number": sale.order_number,
            "total": f"{sale.total:.2f}",
        },
    )
    return sale
