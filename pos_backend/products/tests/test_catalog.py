# products/tests/test_catalog.py

import uuid
from decimal import Decimal

from django.test import TestCase

from businesses.models import Business
from products.models import Product
from products.services.catalog import ProductNotFound, get_product


class CatalogTests(TestCase):
    def setUp(self):
        self.business = Business.objects.create(name="Bistro")
        self.product = Product.objects.create(
            business=self.business, name="Lemonade", price=Decimal("3.20"), current_stock=5
        )

    def test_returns_snapshot(self):
        snap = get_product(business_id=self.business.id, product_id=self.product.id)

        self.assertEqual(snap.id, str(self.product.id))
        self.assertEqual(snap.name, "Lemonade")
        self.assertEqual(snap.price, Decimal("3.20"))

    def test_other_business_product_not_found(self):
        other = Business.objects.create(name="Elsewhere")
        with self.assertRaises(ProductNotFound):
            get_product(business_id=other.id, product_id=self.product.id)

    def test_inactive_product_not_found(self):
        self.product.is_active = False
        self.product.save(update_fields=["is_active"])

        with self.assertRaises(ProductNotFound):
            get_product(business_id=self.business.id, product_id=self.product.id)

    def test_unknown_and_malformed_ids(self):
        with self.assertRaises(ProductNotFound):
            get_product(business_id=self.business.id, product_id=uuid.uuid4())
        with self.assertRaises(ProductNotFound):
            get_product(business_id=self.business.id, product_id="not-a-uuid")

    def test_low_stock_flag(self):
        self.product.min_stock = 5
        self.assertTrue(self.product.is_low_stock)
