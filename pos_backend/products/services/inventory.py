# products/services/inventory.py

"""
======================================================
PATH: products/services/inventory.py
======================================================
INVENTORY DECREMENT (ATOMIC, CLAMPED)

Purpose:
- Lower on-hand stock for products leaving through a sale.

Rules:
- Quantities are integer units.
- Each product is changed by ONE conditional UPDATE:
      current_stock = GREATEST(current_stock - q, 0)
  evaluated by the database, so concurrent decrements are never lost
  and stock never goes below zero.
- Several updates for the same product are summed first.
- Products are updated in a stable (sorted) order inside one transaction,
  so two sales touching the same products cannot deadlock each other.
- Unknown products (deleted, other tenant) are reported back, never created.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Iterable

from django.db import transaction
from django.db.models import F, Value
from django.db.models.functions import Greatest
from django.utils import timezone

from products.models import Product

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StockUpdate:
    product_id: str
    quantity: int


@dataclass
class DecrementResult:
    updated: list[str] = field(default_factory=list)
    missing: list[str] = field(default_factory=list)


def _to_int_qty(value) -> int:
    """
    Quantity normalizer.
    HARD RULE: quantities are integer units in this system.
    """
    if isinstance(value, bool):
        raise ValueError("quantity must be a whole integer unit")
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    raise ValueError("quantity must be a whole integer unit")


def aggregate_updates(updates: Iterable[StockUpdate]) -> dict[str, int]:
    totals: dict[str, int] = defaultdict(int)
    for u in updates:
        qty = _to_int_qty(u.quantity)
        if qty <= 0:
            continue
        totals[str(u.product_id)] += qty
    return dict(totals)


@transaction.atomic
def decrement_stock(*, business_id, updates: Iterable[StockUpdate]) -> DecrementResult:
    totals = aggregate_updates(updates)
    result = DecrementResult()
    now = timezone.now()

    for product_id in sorted(totals):
        qty = totals[product_id]
        changed = Product.objects.filter(
            id=product_id,
            business_id=business_id,
        ).update(
            current_stock=Greatest(F("current_stock") - Value(qty), Value(0)),
            updated_at=now,
        )

        if changed:
            result.updated.append(product_id)
        else:
            logger.warning(
                "Stock decrement skipped for unknown product",
                extra={
                    "business_id": str(business_id),
                    "product_id": product_id,
                    "quantity": qty,
                },
            )
            result.missing.append(product_id)

    return result
