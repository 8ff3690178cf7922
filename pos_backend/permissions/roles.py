# permissions/roles.py

from __future__ import annotations

from typing import Optional

from rest_framework.permissions import BasePermission


# =========================================================
# ROLE CONSTANTS (STAFF JOB ROLES)
# =========================================================
ROLE_ADMIN = "admin"
ROLE_MANAGER = "manager"
ROLE_CASHIER = "cashier"

STAFF_ROLES = {
    ROLE_ADMIN,
    ROLE_MANAGER,
    ROLE_CASHIER,
}


# =========================================================
# CAPABILITIES (THE REAL PERMISSION LANGUAGE)
# =========================================================
# Views protect capabilities, not raw roles.
CAP_POS_SELL = "pos.sell"
CAP_REPORTS_VIEW_POS = "reports.view_pos"
CAP_INVENTORY_SETTLE = "inventory.settle"

ALL_CAPABILITIES = {
    CAP_POS_SELL,
    CAP_REPORTS_VIEW_POS,
    CAP_INVENTORY_SETTLE,
}


# =========================================================
# ROLE → CAPABILITY MAP
# =========================================================
ROLE_CAPABILITIES: dict[str, set[str]] = {
    ROLE_ADMIN: {
        *ALL_CAPABILITIES,
    },
    ROLE_MANAGER: {
        CAP_POS_SELL,
        CAP_REPORTS_VIEW_POS,
        CAP_INVENTORY_SETTLE,
    },
    ROLE_CASHIER: {
        CAP_POS_SELL,
        CAP_REPORTS_VIEW_POS,
    },
}


# =========================================================
# Helpers
# =========================================================
def get_user_role(user) -> Optional[str]:
    return getattr(user, "role", None)


def effective_capabilities_for(request, user) -> set[str]:
    if getattr(user, "is_superuser", False):
        return set(ALL_CAPABILITIES)
    return set(ROLE_CAPABILITIES.get(get_user_role(user), set()))


# =========================================================
# Capability Permissions
# =========================================================
class HasCapability(BasePermission):
    """
    Require a specific capability.

    Usage:
        permission_classes = [IsAuthenticated, HasCapability]
        view.required_capability = CAP_POS_SELL
    """

    def has_permission(self, request, view):
        user = request.user
        if not user or not user.is_authenticated:
            return False

        required = getattr(view, "required_capability", None)
        if not required:
            # deny-by-default so a view without a capability is never open
            return False

        return required in effective_capabilities_for(request, user)


class HasAnyCapability(BasePermission):
    """
    Require ANY capability from a set.

    Usage:
        view.required_any_capabilities = {CAP_REPORTS_VIEW_POS, CAP_INVENTORY_SETTLE}
    """

    def has_permission(self, request, view):
        user = request.user
        if not user or not user.is_authenticated:
            return False

        required = getattr(view, "required_any_capabilities", None)
        if not required:
            return False

        caps = effective_capabilities_for(request, user)
        return any(cap in caps for cap in set(required))


class BelongsToBusiness(BasePermission):
    """
    Tenant guard: the caller must be linked to an active business.
    """

    message = "Your account is not linked to an active business."

    def has_permission(self, request, view):
        user = request.user
        if not user or not user.is_authenticated:
            return False
        business = getattr(user, "business", None)
        return bool(business and business.is_active)
