# products/services/catalog.py

"""
CATALOG SERVICE

Purpose:
- Resolve a product id to the snapshot the cart needs (id, name, price).

Rules:
- Tenant scoped: a product of another business does not exist for the caller.
- Inactive products cannot be added to a cart.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from django.core.exceptions import ValidationError as DjangoValidationError

from products.models import Product


class ProductNotFound(LookupError):
    pass


@dataclass(frozen=True)
class ProductSnapshot:
    id: str
    name: str
    price: Decimal


def get_product(*, business_id, product_id) -> ProductSnapshot:
    try:
        product = (
            Product.objects.only("id", "name", "price")
            .filter(business_id=business_id, is_active=True)
            .get(id=product_id)
        )
    except (Product.DoesNotExist, DjangoValidationError, ValueError):
        # malformed UUIDs surface as ValidationError from the field
        raise ProductNotFound(f"Product {product_id} not found")

    return ProductSnapshot(
        id=str(product.id),
        name=product.name,
        price=Decimal(product.price),
    )
