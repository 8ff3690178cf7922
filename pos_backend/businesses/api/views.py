# businesses/api/views.py

from drf_spectacular.utils import extend_schema
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from businesses.api.serializers import PaymentMethodOptionSerializer
from businesses.services.directory import list_active_methods
from permissions.roles import CAP_POS_SELL, BelongsToBusiness, HasCapability


class PaymentMethodListView(APIView):
    """
    Active payment methods of the caller's business, in display order.
    """

    permission_classes = [IsAuthenticated, BelongsToBusiness, HasCapability]
    required_capability = CAP_POS_SELL
    serializer_class = PaymentMethodOptionSerializer

    @extend_schema(responses={200: PaymentMethodOptionSerializer(many=True)})
    def get(self, request):
        methods = list_active_methods(business_id=request.user.business_id)
        return Response(PaymentMethodOptionSerializer(methods, many=True).data)
