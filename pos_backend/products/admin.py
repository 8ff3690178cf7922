# products/admin.py
"""
=====================================================
PATH: products/admin.py
=====================================================

Admin rules:
- Products are master data of one business.
- current_stock can be set on creation (opening stock); afterwards sales
  lower it through inventory settlement only.
"""

from __future__ import annotations

from django.contrib import admin

from products.models import Product


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = (
        "name",
        "sku",
        "business",
        "price",
        "current_stock",
        "is_low_stock",
        "is_active",
    )
    list_filter = ("business", "is_active", "created_at")
    search_fields = ("name", "sku")
    list_select_related = ("business",)
    ordering = ("name",)

    def get_readonly_fields(self, request, obj=None):
        if obj is not None:
            return ("current_stock", "created_at", "updated_at")
        return ("created_at", "updated_at")

    @admin.display(boolean=True, description="Low stock")
    def is_low_stock(self, obj):
        return obj.is_low_stock
