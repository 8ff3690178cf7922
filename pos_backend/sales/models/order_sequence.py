# sales/models/order_sequence.py

"""
ORDER SEQUENCE (PER-TENANT COUNTER)

Rules:
- One sequence per business.
- current_number only moves forward, and only through
  sales.services.order_numbering (single-statement increment).
- Formatted order number = prefix + zero-padded(current_number, 6).
"""

import uuid

from django.db import models
from django.db.models import Q


class OrderSequence(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    business = models.OneToOneField(
        "businesses.Business",
        on_delete=models.CASCADE,
        related_name="order_sequence",
    )

    current_number = models.PositiveIntegerField(
        default=0,
        help_text="Last issued number. The next order gets current_number + 1.",
    )

    prefix = models.CharField(max_length=16, blank=True, default="")

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        constraints = [
            models.CheckConstraint(
                condition=Q(current_number__gte=0),
                name="order_sequence_current_number_non_negative",
            )
        ]

    def __str__(self):
        return f"{self.business} | {self.prefix}{self.current_number}"
