# businesses/models/payment_method.py

"""
PAYMENT METHOD (DIRECTORY ENTRY)

Purpose:
- Tenant-configured payment methods shown at checkout.
- `kind` selects the checkout capability (tendered cash vs. exact-amount methods).

Rules:
- code is unique per business.
- display_order drives the order methods are offered in.
"""

import uuid

from django.db import models


class PaymentMethod(models.Model):
    KIND_CASH = "cash"
    KIND_CARD = "card"
    KIND_TRANSFER = "transfer"
    KIND_OTHER = "other"

    KIND_CHOICES = [
        (KIND_CASH, "Cash"),
        (KIND_CARD, "Card"),
        (KIND_TRANSFER, "Transfer"),
        (KIND_OTHER, "Other"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    business = models.ForeignKey(
        "businesses.Business",
        on_delete=models.CASCADE,
        related_name="payment_methods",
    )

    code = models.SlugField(max_length=32)
    name = models.CharField(max_length=64)

    kind = models.CharField(
        max_length=16,
        choices=KIND_CHOICES,
        default=KIND_OTHER,
        help_text="cash methods take an amount received and give change",
    )

    icon = models.CharField(max_length=64, blank=True, default="")
    color = models.CharField(max_length=16, blank=True, default="")

    is_active = models.BooleanField(default=True)
    is_system = models.BooleanField(default=False)
    display_order = models.PositiveIntegerField(default=0)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["display_order", "created_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["business", "code"],
                name="unique_payment_method_code_per_business",
            )
        ]

    def __str__(self):
        return f"{self.name} ({self.code})"
