# pos/views/api.py

"""
POS API VIEWS

Purpose:
- Session-held cart lifecycle (add/update/note/remove/clear/seen)
- Payment plan validation (re-run by the UI on every edit)
- Checkout: cart + payment plan -> numbered, immutable Sale

Hard rules:
- Business context comes from the authenticated user, never from the client.
- Money is server-owned: unit_price is snapshotted from the catalog on add.
- The cart is saved back to the session only when it changed, and on checkout
  only when the sale succeeded (a failed sale leaves it intact).
"""

from __future__ import annotations

from django.conf import settings
from drf_spectacular.utils import OpenApiExample, extend_schema
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from businesses.services.directory import list_active_methods
from permissions.roles import CAP_POS_SELL, BelongsToBusiness, HasCapability
from pos.cart import CartLineNotFound
from pos.serializers import (
    AddCartItemInputSerializer,
    CartItemNoteInputSerializer,
    CartSerializer,
    CheckoutResultSerializer,
    PaymentPlanInputSerializer,
    PaymentPlanStateSerializer,
    UpdateCartItemInputSerializer,
)
from pos.session import load_cart, save_cart
from products.services.catalog import ProductNotFound, get_product
from sales.api.errors import error_response
from sales.services.checkout_orchestrator import checkout_cart
from sales.services.payment_plan import MAX_AMOUNT, PaymentPlan


# =====================================================
# API ERROR NORMALIZATION
# =====================================================

CHECKOUT_ERROR_STATUS = {
    "INVALID_PAYMENT": status.HTTP_400_BAD_REQUEST,
    "ORDER_SEQUENCE_UNAVAILABLE": status.HTTP_409_CONFLICT,
    "PERSISTENCE_FAILED": status.HTTP_503_SERVICE_UNAVAILABLE,
}


def _line_not_found(exc: CartLineNotFound):
    return error_response(
        code="CART_LINE_NOT_FOUND",
        message=str(exc),
        http_status=status.HTTP_404_NOT_FOUND,
    )


def _cart_too_large(cart):
    return error_response(
        code="CART_LIMIT_EXCEEDED",
        message=f"Cart total {cart.total():.2f} exceeds the maximum of {MAX_AMOUNT:.2f}.",
        http_status=status.HTTP_400_BAD_REQUEST,
    )


def _build_plan(*, request, cart, payload) -> PaymentPlan:
    return PaymentPlan.from_payload(
        total=cart.total(),
        methods=list_active_methods(business_id=request.user.business_id),
        payload=payload,
        split_slots=getattr(settings, "CHECKOUT_SPLIT_SLOTS", 2),
    )


# =====================================================
# BASE
# =====================================================

class POSView(APIView):
    permission_classes = [IsAuthenticated, BelongsToBusiness, HasCapability]
    required_capability = CAP_POS_SELL

    def load_cart(self, request):
        return load_cart(request, business_id=request.user.business_id)

    def save_cart(self, request, cart):
        save_cart(request, cart, business_id=request.user.business_id)

    def cart_response(self, cart, http_status=status.HTTP_200_OK):
        return Response(CartSerializer(cart).data, status=http_status)

    def edited_cart_response(self, request, cart):
        """Save an edited cart unless its total no longer fits a sale."""
        if cart.total() > MAX_AMOUNT:
            return _cart_too_large(cart)
        self.save_cart(request, cart)
        return self.cart_response(cart)


# =====================================================
# CART
# =====================================================

class ActiveCartView(POSView):
    serializer_class = CartSerializer

    @extend_schema(
        responses={200: CartSerializer},
        description="Current cart for the authenticated cashier",
    )
    def get(self, request):
        return self.cart_response(self.load_cart(request))


class AddCartItemView(POSView):
    """
    Add a product to the cart (increments quantity if the product is already there).
    """

    serializer_class = CartSerializer

    @extend_schema(
        request=AddCartItemInputSerializer,
        responses={200: CartSerializer},
    )
    def post(self, request):
        serializer = AddCartItemInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            product = get_product(
                business_id=request.user.business_id,
                product_id=serializer.validated_data["product_id"],
            )
        except ProductNotFound as exc:
            return error_response(
                code="PRODUCT_NOT_FOUND",
                message=str(exc),
                http_status=status.HTTP_404_NOT_FOUND,
            )

        cart = self.load_cart(request)
        cart.add_item(product, serializer.validated_data["quantity"])
        return self.edited_cart_response(request, cart)


class UpdateCartItemView(POSView):
    serializer_class = CartSerializer

    @extend_schema(
        request=UpdateCartItemInputSerializer,
        responses={200: CartSerializer},
        description="Set a line quantity (0 or less removes the line)",
    )
    def patch(self, request, line_id):
        serializer = UpdateCartItemInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        cart = self.load_cart(request)
        try:
            cart.set_quantity(str(line_id), serializer.validated_data["quantity"])
        except CartLineNotFound as exc:
            return _line_not_found(exc)

        return self.edited_cart_response(request, cart)


class CartItemNoteView(POSView):
    serializer_class = CartSerializer

    @extend_schema(
        request=CartItemNoteInputSerializer,
        responses={200: CartSerializer},
    )
    def patch(self, request, line_id):
        serializer = CartItemNoteInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        cart = self.load_cart(request)
        try:
            cart.set_note(str(line_id), serializer.validated_data["note"])
        except CartLineNotFound as exc:
            return _line_not_found(exc)

        self.save_cart(request, cart)
        return self.cart_response(cart)


class RemoveCartItemView(POSView):
    serializer_class = CartSerializer

    @extend_schema(responses={200: CartSerializer})
    def delete(self, request, line_id):
        cart = self.load_cart(request)
        try:
            cart.remove_item(str(line_id))
        except CartLineNotFound as exc:
            return _line_not_found(exc)

        self.save_cart(request, cart)
        return self.cart_response(cart)


class ClearCartView(POSView):
    """
    Cashier cancels the whole cart in one click.
    """

    serializer_class = CartSerializer

    @extend_schema(responses={200: CartSerializer})
    def delete(self, request):
        cart = self.load_cart(request)
        cart.clear()
        self.save_cart(request, cart)
        return self.cart_response(cart)


class AcknowledgeCartView(POSView):
    """
    Reset the "+N new" counters once the operator has seen the lines.
    """

    serializer_class = CartSerializer

    @extend_schema(request=None, responses={200: CartSerializer})
    def post(self, request):
        cart = self.load_cart(request)
        cart.acknowledge_new_items()
        self.save_cart(request, cart)
        return self.cart_response(cart)


# =====================================================
# PAYMENT PLAN
# =====================================================

class ValidatePaymentPlanView(POSView):
    serializer_class = PaymentPlanStateSerializer

    @extend_schema(
        request=PaymentPlanInputSerializer,
        responses={200: PaymentPlanStateSerializer},
        description="Evaluate a payment plan against the current cart total",
    )
    def post(self, request):
        serializer = PaymentPlanInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        cart = self.load_cart(request)
        plan = _build_plan(request=request, cart=cart, payload=serializer.validated_data)

        return Response(
            PaymentPlanStateSerializer(
                {
                    "total": plan.total,
                    "split": plan.split,
                    "amount_received": plan.amount_received,
                    "change": plan.change,
                    "split_total_entered": plan.split_total_entered,
                    "can_complete": plan.can_complete,
                    "errors": plan.errors(),
                }
            ).data,
            status=status.HTTP_200_OK,
        )


# =====================================================
# CHECKOUT
# =====================================================

class CheckoutCartView(POSView):
    """
    Checkout the session cart into a completed Sale.

    Calls:
    - sales.services.checkout_orchestrator.checkout_cart()
    """

    serializer_class = CheckoutResultSerializer

    @extend_schema(
        request=PaymentPlanInputSerializer,
        responses={201: CheckoutResultSerializer},
        examples=[
            OpenApiExample(
                "Single payment (cash)",
                value={"split": False, "method_code": "cash", "amount_received": "50.00"},
                request_only=True,
            ),
            OpenApiExample(
                "Split payment",
                value={
                    "split": True,
                    "slots": [
                        {"method_code": "cash", "amount": "20.00"},
                        {"method_code": "card", "amount": "15.50"},
                    ],
                },
                request_only=True,
            ),
        ],
    )
    def post(self, request):
        serializer = PaymentPlanInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        cart = self.load_cart(request)
        plan = _build_plan(request=request, cart=cart, payload=serializer.validated_data)

        outcome = checkout_cart(
            business=request.user.business,
            user=request.user,
            cart=cart,
            plan=plan,
        )

        if not outcome.succeeded:
            return error_response(
                code=outcome.error_code,
                message=outcome.message,
                http_status=CHECKOUT_ERROR_STATUS.get(
                    outcome.error_code, status.HTTP_400_BAD_REQUEST
                ),
                retryable=outcome.retryable,
            )

        # the sale is committed: build the body first, then persist the emptied cart
        data = CheckoutResultSerializer(outcome).data
        self.save_cart(request, cart)
        return Response(data, status=status.HTTP_201_CREATED)
