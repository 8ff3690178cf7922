# sales/api/urls.py

"""
SALES API URLS

Rules:
- Explicit non-PK routes MUST be registered BEFORE router URLs,
  otherwise the router treats them as a <pk>.

Provides:
    GET  /api/sales/sales/
    GET  /api/sales/sales/<uuid>/
    POST /api/sales/sales/<uuid>/settle-inventory/
    GET  /api/sales/order-sequence/next/

Checkout itself lives in the POS module (/api/pos/checkout/).
"""

from django.urls import include, path
from rest_framework.routers import DefaultRouter

from sales.api.viewsets.sale import NextOrderNumberView, SaleViewSet

router = DefaultRouter()
router.register(r"sales", SaleViewSet, basename="sales")

urlpatterns = [
    path("order-sequence/next/", NextOrderNumberView.as_view(), name="order-sequence-next"),
    path("", include(router.urls)),
]
