# sales/admin.py

from django.contrib import admin

from sales.models import OrderSequence, Sale


# ======================================================
# SALE ADMIN (READ-ONLY LEDGER)
# ======================================================


@admin.register(Sale)
class SaleAdmin(admin.ModelAdmin):
    list_display = (
        "order_number",
        "business",
        "status",
        "payment_method",
        "total",
        "inventory_settled_at",
        "created_at",
    )
    list_filter = ("business", "status", "payment_method", "created_at")
    search_fields = ("order_number", "customer_name")
    list_select_related = ("business", "user")

    def get_readonly_fields(self, request, obj=None):
        return [f.name for f in self.model._meta.fields]

    def has_add_permission(self, request):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


# ======================================================
# ORDER SEQUENCE ADMIN
# ======================================================


@admin.register(OrderSequence)
class OrderSequenceAdmin(admin.ModelAdmin):
    list_display = ("business", "prefix", "current_number", "updated_at")
    search_fields = ("business__name", "prefix")

    def get_readonly_fields(self, request, obj=None):
        # the counter only moves through the numbering service or the
        # configure_order_sequence command
        if obj is not None:
            return ("business", "current_number", "created_at", "updated_at")
        return ("created_at", "updated_at")
