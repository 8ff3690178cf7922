# sales/api/viewsets/sale.py

"""
======================================================
PATH: sales/api/viewsets/sale.py
======================================================
SALE VIEWSET (STAFF)

Purpose:
- "Sales History" API for the POS UI: list + retrieve, tenant scoped.
- Retry inventory settlement for a sale whose stock is still pending.

Security:
- IsAuthenticated + linked to a business
- List/retrieve: reports.view_pos
- settle-inventory: inventory.settle
======================================================
"""

from __future__ import annotations

from django_filters.rest_framework import DjangoFilterBackend
from drf_spectacular.utils import extend_schema
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from permissions.roles import (
    CAP_INVENTORY_SETTLE,
    CAP_POS_SELL,
    CAP_REPORTS_VIEW_POS,
    BelongsToBusiness,
    HasAnyCapability,
    HasCapability,
)
from sales.api.errors import error_response
from sales.api.filters import SaleFilter
from sales.models import Sale
from sales.serializers import OrderNumberPreviewSerializer, SaleSerializer
from sales.services.exceptions import SequenceExhaustionError, SettlementError
from sales.services.inventory_settlement import settle_sale_inventory
from sales.services.order_numbering import peek_next_order_number


class SaleViewSet(viewsets.ReadOnlyModelViewSet):
    serializer_class = SaleSerializer
    filter_backends = [DjangoFilterBackend]
    filterset_class = SaleFilter

    required_any_capabilities = {CAP_REPORTS_VIEW_POS}

    def get_permissions(self):
        if self.action == "settle_inventory":
            self.required_capability = CAP_INVENTORY_SETTLE
            return [IsAuthenticated(), BelongsToBusiness(), HasCapability()]
        return [IsAuthenticated(), BelongsToBusiness(), HasAnyCapability()]

    def get_queryset(self):
        return (
            Sale.objects.filter(business_id=self.request.user.business_id)
            .select_related("user")
            .order_by("-created_at")
        )

    # ======================================================
    # POST /api/sales/sales/:id/settle-inventory/
    # ======================================================

    @extend_schema(request=None, responses={200: SaleSerializer})
    @action(detail=True, methods=["post"], url_path="settle-inventory")
    def settle_inventory(self, request, pk=None):
        sale: Sale = self.get_object()

        try:
            sale = settle_sale_inventory(sale=sale)
        except SettlementError as exc:
            return error_response(
                code=exc.code,
                message=str(exc),
                http_status=status.HTTP_503_SERVICE_UNAVAILABLE,
                retryable=exc.retryable,
            )

        return Response(SaleSerializer(sale).data, status=status.HTTP_200_OK)


class NextOrderNumberView(APIView):
    """
    Preview of the next order number (NOT reserved).
    """

    permission_classes = [IsAuthenticated, BelongsToBusiness, HasCapability]
    required_capability = CAP_POS_SELL
    serializer_class = OrderNumberPreviewSerializer

    @extend_schema(responses={200: OrderNumberPreviewSerializer})
    def get(self, request):
        try:
            number = peek_next_order_number(business_id=request.user.business_id)
        except SequenceExhaustionError as exc:
            return error_response(
                code=exc.code,
                message=str(exc),
                http_status=status.HTTP_409_CONFLICT,
            )

        return Response(
            OrderNumberPreviewSerializer(
                {"next_order_number": number, "reserved": False}
            ).data
        )
