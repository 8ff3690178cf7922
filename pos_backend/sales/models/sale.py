# sales/models/sale.py

import uuid
from decimal import Decimal

from django.conf import settings
from django.db import models

User = settings.AUTH_USER_MODEL


class Sale(models.Model):
    """
    Represents a completed POS sale (the ledger record).

    GUARANTEES:
    - Immutable financial record once created
    - order_number is unique per business
    - items is an ordered value snapshot (never a live catalog reference)

    SPLIT PAYMENT:
    - payment_method holds the first method's code (legacy single-method field)
    - payment_details holds the full breakdown: {"split": bool, "methods": [...]}

    INVENTORY:
    - inventory_settled_at is stamped once stock has been decremented
    - inventory_settlement_error keeps the last settlement failure for reconciliation
    """

    STATUS_PENDING = "pending"
    STATUS_IN_PREPARATION = "in_preparation"
    STATUS_READY = "ready"
    STATUS_COMPLETED = "completed"
    STATUS_CANCELLED = "cancelled"

    STATUS_CHOICES = [
        (STATUS_PENDING, "Pending"),
        (STATUS_IN_PREPARATION, "In preparation"),
        (STATUS_READY, "Ready"),
        (STATUS_COMPLETED, "Completed"),
        (STATUS_CANCELLED, "Cancelled"),
    ]

    ORDER_TYPE_COUNTER = "counter"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    business = models.ForeignKey(
        "businesses.Business",
        on_delete=models.PROTECT,
        related_name="sales",
    )

    user = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="sales",
        help_text="Cashier who processed the sale",
    )

    order_number = models.CharField(
        max_length=64,
        help_text="Tenant-scoped, human readable order number",
    )

    items = models.JSONField(default=list)

    subtotal = models.DecimalField(
        max_digits=12, decimal_places=2, default=Decimal("0.00")
    )
    discount = models.DecimalField(
        max_digits=12, decimal_places=2, default=Decimal("0.00")
    )
    total = models.DecimalField(
        max_digits=12, decimal_places=2, default=Decimal("0.00")
    )

    payment_method = models.CharField(max_length=32, default="cash")
    payment_details = models.JSONField(default=dict)

    status = models.CharField(
        max_length=32,
        choices=STATUS_CHOICES,
        default=STATUS_COMPLETED,
    )

    order_type = models.CharField(max_length=32, default=ORDER_TYPE_COUNTER)
    created_from = models.CharField(max_length=32, default="pos")
    customer_name = models.CharField(max_length=255, blank=True, default="")

    inventory_settled_at = models.DateTimeField(null=True, blank=True)
    inventory_settlement_error = models.TextField(blank=True, default="")

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["business", "order_number"],
                name="unique_order_number_per_business",
            )
        ]
        indexes = [
            models.Index(fields=["business", "created_at"], name="sale_business_created_idx"),
            models.Index(fields=["status"], name="sale_status_idx"),
        ]

    _IMMUTABLE_FIELDS = (
        "business_id",
        "user_id",
        "order_number",
        "items",
        "subtotal",
        "discount",
        "total",
        "payment_method",
        "payment_details",
        "created_at",
    )

    @property
    def is_inventory_pending(self) -> bool:
        return self.inventory_settled_at is None

    def _validate_immutable(self, previous: "Sale"):
        for field in self._IMMUTABLE_FIELDS:
            if getattr(self, field) != getattr(previous, field):
                raise ValueError(
                    f"Sale {previous.order_number} is immutable. "
                    f"Field '{field}' cannot be changed."
                )

    def save(self, *args, **kwargs):
        if self.pk and not self._state.adding:
            previous = Sale.objects.filter(pk=self.pk).first()
            if previous is not None:
                self._validate_immutable(previous)

        super().save(*args, **kwargs)

    def __str__(self):
        return f"{self.order_number} | {self.total}"
