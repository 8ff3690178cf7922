# businesses/tests/test_directory.py

from django.contrib.auth import get_user_model
from rest_framework import status
from rest_framework.test import APIClient, APITestCase

from businesses.models import Business, PaymentMethod
from businesses.services.directory import list_active_methods

User = get_user_model()


class PaymentMethodDirectoryTests(APITestCase):
    def setUp(self):
        self.business = Business.objects.create(name="Bookshop")
        self.other = Business.objects.create(name="Florist")

        PaymentMethod.objects.create(
            business=self.business, code="card", name="Card",
            kind=PaymentMethod.KIND_CARD, display_order=2,
        )
        PaymentMethod.objects.create(
            business=self.business, code="cash", name="Cash",
            kind=PaymentMethod.KIND_CASH, display_order=1,
        )
        PaymentMethod.objects.create(
            business=self.business, code="voucher", name="Voucher",
            display_order=0, is_active=False,
        )
        PaymentMethod.objects.create(
            business=self.other, code="transfer", name="Transfer",
            kind=PaymentMethod.KIND_TRANSFER,
        )

    def test_active_methods_in_display_order(self):
        methods = list_active_methods(business_id=self.business.id)

        self.assertEqual([m.code for m in methods], ["cash", "card"])
        self.assertTrue(methods[0].capability.accepts_tender)
        self.assertFalse(methods[1].capability.accepts_tender)

    def test_unknown_business_has_no_methods(self):
        self.assertEqual(list_active_methods(business_id=Business().id), [])

    def test_payment_methods_endpoint(self):
        cashier = User.objects.create_user(
            email="clerk@bookshop.test", password="pass",
            role="cashier", business=self.business,
        )
        client = APIClient()
        client.force_authenticate(cashier)

        res = client.get("/api/businesses/payment-methods/")

        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(
            [(m["code"], m["accepts_tender"]) for m in res.data],
            [("cash", True), ("card", False)],
        )

    def test_inactive_business_is_forbidden(self):
        self.business.is_active = False
        self.business.save(update_fields=["is_active"])
        cashier = User.objects.create_user(
            email="clerk@bookshop.test", password="pass",
            role="cashier", business=self.business,
        )
        client = APIClient()
        client.force_authenticate(cashier)

        res = client.get("/api/businesses/payment-methods/")

        self.assertEqual(res.status_code, status.HTTP_403_FORBIDDEN)
