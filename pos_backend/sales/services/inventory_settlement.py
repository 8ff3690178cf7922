# sales/services/inventory_settlement.py

"""
INVENTORY SETTLEMENT

Purpose:
- Decrement stock for the lines of an already committed sale.

Rules:
- Runs AFTER the sale commit. A failure here never undoes the sale:
  it is recorded on the sale (inventory_settlement_error) and raised as
  SettlementError so the caller can report "sale OK, inventory pending".
- Idempotent per sale: the sale row is locked and inventory_settled_at is
  stamped in the same transaction as the decrement, so retries can never
  decrement twice.
"""

from __future__ import annotations

import logging

from django.db import DatabaseError, transaction
from django.utils import timezone

from products.services.inventory import StockUpdate, decrement_stock
from sales.models import Sale

from .exceptions import SettlementError

logger = logging.getLogger(__name__)


def stock_updates_for(sale: Sale) -> list[StockUpdate]:
    return [
        StockUpdate(product_id=str(item["product_id"]), quantity=int(item["quantity"]))
        for item in (sale.items or [])
        if item.get("product_id")
    ]


def _settle(sale_id) -> Sale:
    with transaction.atomic():
        sale = Sale.objects.select_for_update().get(pk=sale_id)
        if sale.inventory_settled_at is not None:
            return sale

        result = decrement_stock(
            business_id=sale.business_id,
            updates=stock_updates_for(sale),
        )
        if result.missing:
            logger.warning(
                "Sale settled with unknown products",
                extra={"sale_id": str(sale.id), "missing": result.missing},
            )

        sale.inventory_settled_at = timezone.now()
        sale.inventory_settlement_error = ""
        sale.save(update_fields=["inventory_settled_at", "inventory_settlement_error"])
        return sale


def _record_failure(sale_id, message: str) -> None:
    Sale.objects.filter(pk=sale_id, inventory_settled_at__isnull=True).update(
        inventory_settlement_error=message[:2000]
    )


def settle_sale_inventory(*, sale: Sale) -> Sale:
    try:
        settled = _settle(sale.pk)
    except Exception as exc:
        logger.exception(
            "Inventory settlement failed",
            extra={"sale_id": str(sale.pk), "order_number": sale.order_number},
        )
        try:
            _record_failure(sale.pk, str(exc) or exc.__class__.__name__)
        except DatabaseError:
            logger.exception(
                "Could not record settlement failure",
                extra={"sale_id": str(sale.pk)},
            )
        raise SettlementError(
            f"Sale {sale.order_number} was recorded but stock could not be updated.",
            sale_id=sale.pk,
        ) from exc

    sale.inventory_settled_at = settled.inventory_settled_at
    sale.inventory_settlement_error = settled.inventory_settlement_error
    logger.info(
        "Inventory settled",
        extra={"sale_id": str(sale.pk), "order_number": sale.order_number},
    )
    return sale


def retry_pending_settlements(*, business_id=None, limit: int | None = None) -> dict:
    """
    Retry every sale whose stock was never decremented.

    Returns counts: {"settled": n, "failed": n}
    """
    qs = Sale.objects.filter(inventory_settled_at__isnull=True).order_by("created_at")
    if business_id is not None:
        qs = qs.filter(business_id=business_id)
    if limit:
        qs = qs[:limit]

    settled = failed = 0
    for sale in qs:
        try:
            settle_sale_inventory(sale=sale)
        except SettlementError:
            failed += 1
        else:
            settled += 1

    return {"settled": settled, "failed": failed}
