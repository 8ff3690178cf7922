# pos/session.py

"""
Cart <-> Django session.

The cart is owned by the cashier's session and keyed per business, so a user
moved between businesses never carries lines across tenants.
"""

from django.conf import settings

from .cart import Cart


def _session_key(business_id) -> str:
    prefix = getattr(settings, "CHECKOUT_CART_SESSION_KEY", "pos.cart")
    return f"{prefix}.{business_id}"


def load_cart(request, *, business_id) -> Cart:
    return Cart.from_dict(request.session.get(_session_key(business_id)))


def save_cart(request, cart: Cart, *, business_id) -> None:
    # assign a fresh dict so the session is marked modified
    request.session[_session_key(business_id)] = cart.to_dict()
