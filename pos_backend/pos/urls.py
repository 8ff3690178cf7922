"""
PATH: pos/urls.py

POS URLS

Purpose:
- Cart lifecycle
- Cart line operations
- Payment plan validation
- Checkout (finalizes the cart into a Sale via the checkout orchestrator)
"""

from django.urls import path

from pos.views.api import (
    AcknowledgeCartView,
    ActiveCartView,
    AddCartItemView,
    CartItemNoteView,
    CheckoutCartView,
    ClearCartView,
    RemoveCartItemView,
    UpdateCartItemView,
    ValidatePaymentPlanView,
)

app_name = "pos"

urlpatterns = [
    path("cart/", ActiveCartView.as_view(), name="active-cart"),
    path("cart/clear/", ClearCartView.as_view(), name="clear-cart"),
    path("cart/seen/", AcknowledgeCartView.as_view(), name="acknowledge-cart"),

    path("cart/items/add/", AddCartItemView.as_view(), name="add-cart-item"),
    path("cart/items/<uuid:line_id>/update/", UpdateCartItemView.as_view(), name="update-cart-item"),
    path("cart/items/<uuid:line_id>/note/", CartItemNoteView.as_view(), name="note-cart-item"),
    path("cart/items/<uuid:line_id>/remove/", RemoveCartItemView.as_view(), name="remove-cart-item"),

    path("payment-plan/validate/", ValidatePaymentPlanView.as_view(), name="validate-payment-plan"),
    path("checkout/", CheckoutCartView.as_view(), name="checkout"),
]
