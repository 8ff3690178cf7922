# products/models/product.py

import uuid
from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import models


class Product(models.Model):
    """
    Represents a sellable product of one business.

    STOCK MODEL (IMPORTANT):
    - current_stock is a plain on-hand counter.
    - It is only ever lowered by products.services.inventory.decrement_stock(),
      which clamps at zero in the database (never read-modify-write in Python).
    - The DB constraint is the last line: current_stock >= 0.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    business = models.ForeignKey(
        "businesses.Business",
        on_delete=models.CASCADE,
        related_name="products",
    )

    name = models.CharField(max_length=255, db_index=True)
    sku = models.CharField(max_length=128, blank=True, default="")

    # Current selling price (snapshotted into the cart on add)
    price = models.DecimalField(max_digits=10, decimal_places=2)

    current_stock = models.IntegerField(default=0)
    min_stock = models.PositiveIntegerField(default=0)

    is_active = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["name"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(current_stock__gte=0),
                name="product_current_stock_non_negative",
            ),
        ]
        indexes = [
            models.Index(fields=["business", "name"], name="product_business_name_idx"),
        ]

    def __str__(self):
        return f"{self.name} ({self.sku})" if self.sku else self.name

    def clean(self):
        if self.price is None or Decimal(self.price) < Decimal("0.00"):
            raise ValidationError("Price cannot be negative")

        if self.current_stock is not None and int(self.current_stock) < 0:
            raise ValidationError("current_stock cannot be negative")

    @property
    def is_low_stock(self) -> bool:
        return int(self.current_stock or 0) <= int(self.min_stock or 0)
