# businesses/services/directory.py

"""
PAYMENT METHOD DIRECTORY

Purpose:
- Read-only lookup of a tenant's active payment methods for checkout.
- Returns plain value objects (PaymentMethodOption), never live model rows.
"""

from __future__ import annotations

from businesses.models import PaymentMethod
from sales.services.payment_plan import PaymentMethodOption


def list_active_methods(*, business_id) -> list[PaymentMethodOption]:
    qs = PaymentMethod.objects.filter(
        business_id=business_id,
        is_active=True,
    ).order_by("display_order", "created_at")

    return [
        PaymentMethodOption(
            code=pm.code,
            name=pm.name,
            kind=pm.kind,
            color=pm.color,
            icon=pm.icon,
        )
        for pm in qs
    ]
