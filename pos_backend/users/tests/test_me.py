# users/tests/test_me.py

from django.contrib.auth import authenticate, get_user_model
from django.test import TestCase
from rest_framework import status
from rest_framework.test import APIClient

from businesses.models import Business
from permissions.roles import (
    CAP_INVENTORY_SETTLE,
    CAP_POS_SELL,
    CAP_REPORTS_VIEW_POS,
    effective_capabilities_for,
)

User = get_user_model()


class CapabilityTests(TestCase):
    def setUp(self):
        self.business = Business.objects.create(name="Corner Shop")

    def _user(self, role, **extra):
        return User.objects.create_user(
            email=f"{role}@corner.test", password="pass", role=role,
            business=self.business, **extra,
        )

    def test_cashier_sells_but_cannot_settle(self):
        caps = effective_capabilities_for(None, self._user(User.ROLE_CASHIER))

        self.assertIn(CAP_POS_SELL, caps)
        self.assertIn(CAP_REPORTS_VIEW_POS, caps)
        self.assertNotIn(CAP_INVENTORY_SETTLE, caps)

    def test_manager_can_settle(self):
        caps = effective_capabilities_for(None, self._user(User.ROLE_MANAGER))
        self.assertIn(CAP_INVENTORY_SETTLE, caps)

    def test_unknown_role_has_nothing(self):
        user = self._user(User.ROLE_CASHIER)
        user.role = "janitor"
        self.assertEqual(effective_capabilities_for(None, user), set())

    def test_superuser_has_everything(self):
        admin = User.objects.create_superuser(email="root@corner.test", password="pass")
        caps = effective_capabilities_for(None, admin)

        self.assertEqual(caps, {CAP_POS_SELL, CAP_REPORTS_VIEW_POS, CAP_INVENTORY_SETTLE})


class UserManagerTests(TestCase):
    def test_username_is_derived_from_email(self):
        user = User.objects.create_user(email="Ana@Shop.test", password="pass")
        other = User.objects.create_user(email="ana@other.test", password="pass")

        self.assertEqual(user.username, "ana")
        self.assertEqual(other.username, "ana2")
        self.assertEqual(user.role, User.ROLE_CASHIER)

    def test_login_with_email_or_username(self):
        User.objects.create_user(email="till@shop.test", username="till", password="s3cret")

        self.assertIsNotNone(authenticate(username="till@shop.test", password="s3cret"))
        self.assertIsNotNone(authenticate(username="TILL", password="s3cret"))
        self.assertIsNone(authenticate(username="till", password="wrong"))


class MeViewTests(TestCase):
    def test_me_returns_business_and_capabilities(self):
        business = Business.objects.create(name="Corner Shop")
        user = User.objects.create_user(
            email="cashier@corner.test", password="pass",
            role=User.ROLE_CASHIER, business=business,
        )
        client = APIClient()
        client.force_authenticate(user)

        res = client.get("/api/auth/me/")

        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data["business_id"], str(business.id))
        self.assertEqual(res.data["capabilities"], [CAP_POS_SELL, CAP_REPORTS_VIEW_POS])

    def test_jwt_login(self):
        User.objects.create_user(email="jwt@corner.test", password="pass")

        res = APIClient().post(
            "/api/auth/jwt/create/",
            {"email": "jwt@corner.test", "password": "pass"},
            format="json",
        )

        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertIn("access", res.data)
