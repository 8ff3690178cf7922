# sales/tests/test_api.py

from decimal import Decimal

from django.contrib.auth import get_user_model
from rest_framework import status
from rest_framework.test import APIClient, APITestCase

from businesses.models import Business
from products.models import Product
from sales.models import OrderSequence, Sale

User = get_user_model()

SALES_URL = "/api/sales/sales/"
NEXT_NUMBER_URL = "/api/sales/order-sequence/next/"


def _sale(business, order_number, *, items=None, payment_method="cash", settled=False):
    sale = Sale.objects.create(
        business=business,
        order_number=order_number,
        items=items or [],
        subtotal=Decimal("4.00"),
        total=Decimal("4.00"),
        payment_method=payment_method,
        payment_details={"split": False, "methods": [{"code": payment_method, "amount": "4.00"}]},
    )
    if settled:
        Sale.objects.filter(pk=sale.pk).update(inventory_settled_at=sale.created_at)
    return sale


class SalesApiTests(APITestCase):
    """
    Sales history is tenant scoped and read-only.
    """

    def setUp(self):
        self.business = Business.objects.create(name="Bakery")
        self.other = Business.objects.create(name="Butcher")

        self.cashier = User.objects.create_user(
            email="cashier@bakery.test", password="pass",
            role="cashier", business=self.business,
        )
        self.manager = User.objects.create_user(
            email="manager@bakery.test", password="pass",
            role="manager", business=self.business,
        )

        self.bread = Product.objects.create(
            business=self.business, name="Bread", price=Decimal("2.00"), current_stock=10
        )

        self.own_cash = _sale(self.business, "000001", settled=True)
        self.own_card = _sale(
            self.business,
            "000002",
            payment_method="card",
            items=[{"product_id": str(self.bread.id), "product_name": "Bread", "quantity": 2,
                    "unit_price": "2.00", "total": "4.00", "notes": ""}],
        )
        self.foreign = _sale(self.other, "000001", settled=True)

        self.client = APIClient()
        self.client.force_authenticate(self.cashier)

    def test_list_is_scoped_to_business(self):
        res = self.client.get(SALES_URL)

        self.assertEqual(res.status_code, status.HTTP_200_OK)
        ids = {row["id"] for row in res.data["results"]}
        self.assertEqual(ids, {str(self.own_cash.id), str(self.own_card.id)})

    def test_filter_by_payment_method(self):
        res = self.client.get(SALES_URL, {"payment_method": "CARD"})

        self.assertEqual([r["order_number"] for r in res.data["results"]], ["000002"])

    def test_filter_inventory_pending(self):
        res = self.client.get(SALES_URL, {"inventory_pending": "true"})

        self.assertEqual([r["order_number"] for r in res.data["results"]], ["000002"])
        self.assertTrue(res.data["results"][0]["is_inventory_pending"])

    def test_retrieve_foreign_sale_is_404(self):
        res = self.client.get(f"{SALES_URL}{self.foreign.id}/")
        self.assertEqual(res.status_code, status.HTTP_404_NOT_FOUND)

    def test_retrieve_returns_line_snapshot(self):
        res = self.client.get(f"{SALES_URL}{self.own_card.id}/")

        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data["items"][0]["product_name"], "Bread")
        self.assertEqual(res.data["cashier_email"], None)

    def test_sales_are_read_only(self):
        res = self.client.delete(f"{SALES_URL}{self.own_cash.id}/")
        self.assertEqual(res.status_code, status.HTTP_405_METHOD_NOT_ALLOWED)

    def test_cashier_cannot_settle_inventory(self):
        res = self.client.post(f"{SALES_URL}{self.own_card.id}/settle-inventory/")
        self.assertEqual(res.status_code, status.HTTP_403_FORBIDDEN)

    def test_manager_settles_inventory(self):
        self.client.force_authenticate(self.manager)

        res = self.client.post(f"{SALES_URL}{self.own_card.id}/settle-inventory/")

        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertFalse(res.data["is_inventory_pending"])
        self.bread.refresh_from_db()
        self.assertEqual(self.bread.current_stock, 8)

    def test_next_order_number_preview(self):
        OrderSequence.objects.create(business=self.business, prefix="B", current_number=41)

        res = self.client.get(NEXT_NUMBER_URL)

        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data, {"next_order_number": "B000042", "reserved": False})

    def test_next_order_number_without_sequence(self):
        res = self.client.get(NEXT_NUMBER_URL)

        self.assertEqual(res.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(res.data["error"]["code"], "ORDER_SEQUENCE_UNAVAILABLE")

    def test_anonymous_is_rejected(self):
        self.client.force_authenticate(None)
        res = self.client.get(SALES_URL)
        self.assertIn(res.status_code, (status.HTTP_401_UNAUTHORIZED, status.HTTP_403_FORBIDDEN))
