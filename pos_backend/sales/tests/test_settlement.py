# sales/tests/test_settlement.py

from decimal import Decimal
from io import StringIO
from unittest import mock

from django.core.management import call_command
from django.db import DatabaseError
from django.test import TestCase

from businesses.models import Business
from products.models import Product
from sales.models import Sale
from sales.services.exceptions import SettlementError
from sales.services.inventory_settlement import (
    retry_pending_settlements,
    settle_sale_inventory,
    stock_updates_for,
)


def _sale(business, order_number, items):
    return Sale.objects.create(
        business=business,
        order_number=order_number,
        items=items,
        subtotal=Decimal("10.00"),
        total=Decimal("10.00"),
        payment_method="cash",
        payment_details={"split": False, "methods": [{"code": "cash", "amount": "10.00"}]},
    )


class SettlementTests(TestCase):
    """
    GUARANTEES:
    - Stock is decremented once per sale, however often settlement runs
    - Failures never touch the sale's financial data and are retryable
    """

    def setUp(self):
        self.business = Business.objects.create(name="Kiosk")
        self.chips = Product.objects.create(
            business=self.business, name="Chips", price=Decimal("1.50"), current_stock=10
        )
        self.soda = Product.objects.create(
            business=self.business, name="Soda", price=Decimal("2.00"), current_stock=1
        )
        self.sale = _sale(
            self.business,
            "000001",
            [
                {"product_id": str(self.chips.id), "product_name": "Chips", "quantity": 4},
                {"product_id": str(self.soda.id), "product_name": "Soda", "quantity": 3},
            ],
        )

    def test_stock_updates_for_sale(self):
        updates = stock_updates_for(self.sale)
        self.assertEqual([(u.product_id, u.quantity) for u in updates], [
            (str(self.chips.id), 4),
            (str(self.soda.id), 3),
        ])

    def test_settle_decrements_and_stamps(self):
        settle_sale_inventory(sale=self.sale)

        self.chips.refresh_from_db()
        self.soda.refresh_from_db()
        self.sale.refresh_from_db()
        self.assertEqual(self.chips.current_stock, 6)
        self.assertEqual(self.soda.current_stock, 0)
        self.assertIsNotNone(self.sale.inventory_settled_at)

    def test_settle_is_idempotent(self):
        settle_sale_inventory(sale=self.sale)
        settle_sale_inventory(sale=self.sale)

        self.chips.refresh_from_db()
        self.assertEqual(self.chips.current_stock, 6)

    def test_unknown_product_is_skipped(self):
        self.chips.delete()

        settle_sale_inventory(sale=self.sale)

        self.soda.refresh_from_db()
        self.sale.refresh_from_db()
        self.assertEqual(self.soda.current_stock, 0)
        self.assertFalse(self.sale.is_inventory_pending)

    def test_failure_is_recorded_and_raised(self):
        with mock.patch(
            "sales.services.inventory_settlement.decrement_stock",
            side_effect=DatabaseError("lock timeout"),
        ):
            with self.assertRaises(SettlementError) as ctx:
                settle_sale_inventory(sale=self.sale)

        self.assertEqual(ctx.exception.sale_id, self.sale.pk)
        self.assertTrue(ctx.exception.retryable)

        self.sale.refresh_from_db()
        self.assertTrue(self.sale.is_inventory_pending)
        self.assertIn("lock timeout", self.sale.inventory_settlement_error)
        self.assertEqual(self.sale.total, Decimal("10.00"))

        self.chips.refresh_from_db()
        self.assertEqual(self.chips.current_stock, 10)

    def test_retry_pending_settlements(self):
        _sale(
            self.business,
            "000002",
            [{"product_id": str(self.chips.id), "product_name": "Chips", "quantity": 1}],
        )

        result = retry_pending_settlements(business_id=self.business.id)

        self.assertEqual(result, {"settled": 2, "failed": 0})
        self.chips.refresh_from_db()
        self.assertEqual(self.chips.current_stock, 5)
        self.assertFalse(Sale.objects.filter(inventory_settled_at__isnull=True).exists())

    def test_settle_pending_inventory_command(self):
        out = StringIO()
        call_command("settle_pending_inventory", stdout=out)

        self.assertIn("Settled: 1", out.getvalue())
        self.sale.refresh_from_db()
        self.assertFalse(self.sale.is_inventory_pending)
