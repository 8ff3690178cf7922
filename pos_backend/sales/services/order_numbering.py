# sales/services/order_numbering.py

"""
ORDER NUMBERING SERVICE

Purpose:
- Issue a unique, monotonically increasing, formatted order number per business.

Hard rules:
- Reservation is ONE atomic operation: a single UPDATE increments the counter
  in the database, then the new value is read back inside the same
  transaction while the row is still locked by that UPDATE.
  Concurrent checkouts on the same business can never read the same number.
- Numbers consumed by a rolled-back checkout are not reissued only when the
  surrounding transaction commits; callers that wrap this in their own
  transaction get the increment rolled back together with the sale.
- Width is a fixed contract (6 digits). A number that no longer fits is a
  configuration problem, never a wider string.
"""

from __future__ import annotations

import logging

from django.db import transaction
from django.db.models import F
from django.utils import timezone

from sales.models import OrderSequence

from .exceptions import SequenceExhaustionError

logger = logging.getLogger(__name__)

ORDER_NUMBER_WIDTH = 6
MAX_ORDER_NUMBER = 10**ORDER_NUMBER_WIDTH - 1

NO_SEQUENCE_MESSAGE = (
    "No order sequence is configured for this business. "
    "Contact the administrator."
)


def format_order_number(prefix: str | None, number: int) -> str:
    return f"{prefix or ''}{int(number):0{ORDER_NUMBER_WIDTH}d}"


@transaction.atomic
def reserve_next_order_number(*, business_id) -> str:
    updated = OrderSequence.objects.filter(business_id=business_id).update(
        current_number=F("current_number") + 1,
        updated_at=timezone.now(),
    )
    if not updated:
        raise SequenceExhaustionError(NO_SEQUENCE_MESSAGE)

    seq = OrderSequence.objects.only("current_number", "prefix").get(
        business_id=business_id
    )

    if seq.current_number > MAX_ORDER_NUMBER:
        # raising inside the atomic block rolls the increment back
        raise SequenceExhaustionError(
            f"Order sequence for this business has reached {MAX_ORDER_NUMBER}. "
            "Contact the administrator."
        )

    order_number = format_order_number(seq.prefix, seq.current_number)
    logger.info(
        "Order number reserved",
        extra={"business_id": str(business_id), "order_number": order_number},
    )
    return order_number


def peek_next_order_number(*, business_id) -> str:
    """
    Preview only. The returned number is NOT reserved and may be taken by
    another terminal before this one checks out.
    """
    seq = OrderSequence.objects.filter(business_id=business_id).first()
    if seq is None:
        raise SequenceExhaustionError(NO_SEQUENCE_MESSAGE)
    return format_order_number(seq.prefix, seq.current_number + 1)


@transaction.atomic
def configure_order_sequence(*, business, prefix=None, start_at=None) -> OrderSequence:
    """
    Create or adjust a business' sequence.

    start_at is the last issued number; it can move the counter forward but
    never backwards (numbers are never reused).
    """
    seq, created = OrderSequence.objects.select_for_update().get_or_create(
        business=business,
        defaults={
            "prefix": (prefix or "").strip(),
            "current_number": int(start_at or 0),
        },
    )
    if created:
        return seq

    dirty = []
    if prefix is not None and seq.prefix != prefix.strip():
        seq.prefix = prefix.strip()
        dirty.append("prefix")

    if start_at is not None:
        start_at = int(start_at)
        if start_at < seq.current_number:
            raise ValueError(
                f"Cannot move order sequence back from {seq.current_number} to {start_at}."
            )
        if start_at != seq.current_number:
            seq.current_number = start_at
            dirty.append("current_number")

    if dirty:
        seq.save(update_fields=dirty + ["updated_at"])
    return seq
