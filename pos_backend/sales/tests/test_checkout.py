# sales/tests/test_checkout.py

from decimal import Decimal
from unittest import mock

from django.contrib.auth import get_user_model
from django.db import DatabaseError
from django.test import TestCase

from businesses.models import Business, PaymentMethod
from businesses.services.directory import list_active_methods
from pos.cart import Cart
from products.models import Product
from products.services.catalog import get_product
from sales.models import OrderSequence, Sale
from sales.services import checkout_cart
from sales.services.exceptions import CheckoutValidationError
from sales.services.checkout_orchestrator import process_sale
from sales.services.payment_plan import PaymentPlan

User = get_user_model()


class CheckoutTests(TestCase):
    """
    End-to-end checkout pipeline.

    GUARANTEES:
    - Success: one numbered sale, cart cleared, stock decremented
    - Failure before commit: no sale, cart intact, no number consumed
    - Failure after commit: sale kept, inventory reported as pending
    """

    def setUp(self):
        self.business = Business.objects.create(name="Diner")
        self.sequence = OrderSequence.objects.create(business=self.business, prefix="D-")
        self.user = User.objects.create_user(
            email="cashier@diner.test",
            password="pass",
            role="cashier",
            business=self.business,
        )

        PaymentMethod.objects.create(
            business=self.business, code="cash", name="Cash",
            kind=PaymentMethod.KIND_CASH, display_order=0,
        )
        PaymentMethod.objects.create(
            business=self.business, code="card", name="Card",
            kind=PaymentMethod.KIND_CARD, display_order=1,
        )

        self.burger = Product.objects.create(
            business=self.business, name="Burger", price=Decimal("8.50"), current_stock=20
        )
        self.fries = Product.objects.create(
            business=self.business, name="Fries", price=Decimal("3.00"), current_stock=5
        )

        self.cart = Cart()
        self.cart.add_item(get_product(business_id=self.business.id, product_id=self.burger.id), 2)
        self.cart.add_item(get_product(business_id=self.business.id, product_id=self.fries.id), 1)

    def _plan(self):
        return PaymentPlan(
            total=self.cart.total(),
            methods=list_active_methods(business_id=self.business.id),
        )

    def _checkout(self, plan):
        return checkout_cart(business=self.business, user=self.user, cart=self.cart, plan=plan)

    def _counter(self):
        self.sequence.refresh_from_db()
        return self.sequence.current_number

    # ---------------------------
    # Success
    # ---------------------------

    def test_cash_checkout_records_sale(self):
        plan = self._plan()
        plan.select_method("cash")
        plan.set_amount_received("30")

        outcome = self._checkout(plan)

        self.assertTrue(outcome.succeeded)
        self.assertEqual(outcome.order_number, "D-000001")
        self.assertEqual(outcome.total, Decimal("20.00"))
        self.assertEqual(outcome.change, Decimal("10.00"))
        self.assertFalse(outcome.inventory_pending)
        self.assertTrue(self.cart.is_empty)

        sale = Sale.objects.get()
        self.assertEqual(sale.pk, outcome.sale.pk)
        self.assertEqual(sale.payment_method, "cash")
        self.assertEqual(
            sale.payment_details,
            {"split": False, "methods": [{"code": "cash", "amount": "20.00"}]},
        )
        self.assertEqual(sale.user, self.user)

        self.burger.refresh_from_db()
        self.fries.refresh_from_db()
        self.assertEqual(self.burger.current_stock, 18)
        self.assertEqual(self.fries.current_stock, 4)

    def test_consecutive_checkouts_get_consecutive_numbers(self):
        plan = self._plan()
        plan.select_method("card")
        first = self._checkout(plan)

        self.cart.add_item(get_product(business_id=self.business.id, product_id=self.fries.id), 1)
        plan = self._plan()
        plan.select_method("card")
        second = self._checkout(plan)

        self.assertEqual([first.order_number, second.order_number], ["D-000001", "D-000002"])

    def test_split_breakdown_is_persisted(self):
        plan = self._plan()
        plan.set_split(True)
        plan.set_slot(0, method_code="card", amount="15")
        plan.set_slot(1, method_code="cash", amount="5")

        outcome = self._checkout(plan)

        self.assertTrue(outcome.succeeded)
        sale = Sale.objects.get()
        self.assertEqual(sale.payment_method, "card")
        self.assertEqual(
            sale.payment_details,
            {
                "split": True,
                "methods": [
                    {"code": "card", "amount": "15.00"},
                    {"code": "cash", "amount": "5.00"},
                ],
            },
        )

    # ---------------------------
    # Failure before commit
    # ---------------------------

    def test_insufficient_cash_records_nothing(self):
        plan = self._plan()
        plan.select_method("cash")
        plan.set_amount_received("5")

        outcome = self._checkout(plan)

        self.assertFalse(outcome.succeeded)
        self.assertEqual(outcome.error_code, "INVALID_PAYMENT")
        self.assertFalse(outcome.retryable)
        self.assertFalse(Sale.objects.exists())
        self.assertEqual(self.cart.item_count, 3)
        self.assertEqual(self._counter(), 0)

    def test_empty_cart_is_rejected(self):
        self.cart.clear()
        plan = self._plan()

        outcome = self._checkout(plan)

        self.assertFalse(outcome.succeeded)
        self.assertEqual(outcome.error_code, "INVALID_PAYMENT")
        self.assertEqual(self._counter(), 0)

    def test_plan_total_must_match_cart(self):
        plan = PaymentPlan(
            total=Decimal("1.00"),
            methods=list_active_methods(business_id=self.business.id),
        )
        plan.select_method("card")

        with self.assertRaises(CheckoutValidationError):
            process_sale(business=self.business, user=self.user, cart=self.cart, plan=plan)

        self.assertFalse(Sale.objects.exists())

    def test_missing_sequence_fails_without_sale(self):
        self.sequence.delete()
        plan = self._plan()
        plan.select_method("card")

        outcome = self._checkout(plan)

        self.assertFalse(outcome.succeeded)
        self.assertEqual(outcome.error_code, "ORDER_SEQUENCE_UNAVAILABLE")
        self.assertFalse(Sale.objects.exists())
        self.assertFalse(self.cart.is_empty)

    def test_persistence_failure_gives_number_back(self):
        plan = self._plan()
        plan.select_method("card")

        with mock.patch.object(Sale.objects, "create", side_effect=DatabaseError("gone")):
            outcome = self._checkout(plan)

        self.assertFalse(outcome.succeeded)
        self.assertEqual(outcome.error_code, "PERSISTENCE_FAILED")
        self.assertTrue(outcome.retryable)
        self.assertFalse(self.cart.is_empty)
        self.assertEqual(self._counter(), 0)

        outcome = self._checkout(plan)
        self.assertEqual(outcome.order_number, "D-000001")

    # ---------------------------
    # Failure after commit
    # ---------------------------

    def test_settlement_failure_keeps_sale(self):
        plan = self._plan()
        plan.select_method("card")

        with mock.patch(
            "sales.services.inventory_settlement.decrement_stock",
            side_effect=DatabaseError("lock timeout"),
        ):
            outcome = self._checkout(plan)

        self.assertTrue(outcome.succeeded)
        self.assertTrue(outcome.inventory_pending)
        self.assertTrue(self.cart.is_empty)

        sale = Sale.objects.get()
        self.assertTrue(sale.is_inventory_pending)

        self.burger.refresh_from_db()
        self.assertEqual(self.burger.current_stock, 20)
