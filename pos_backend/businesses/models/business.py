# businesses/models/business.py

import uuid

from django.db import models


class Business(models.Model):
    """
    Represents a tenant (one shop / restaurant / counter business).

    Rules:
    - Catalog, order sequence and payment methods are scoped by business.
    - Businesses are stable master-data (deactivate, never delete).
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    name = models.CharField(max_length=255)

    is_active = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["name"]
        verbose_name_plural = "businesses"

    def __str__(self):
        return self.name
