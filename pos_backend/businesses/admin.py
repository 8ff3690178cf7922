# businesses/admin.py

from django.contrib import admin

from businesses.models import Business, PaymentMethod


class PaymentMethodInline(admin.TabularInline):
    model = PaymentMethod
    extra = 0
    fields = ("code", "name", "kind", "icon", "color", "display_order", "is_active", "is_system")


@admin.register(Business)
class BusinessAdmin(admin.ModelAdmin):
    list_display = ("name", "is_active", "created_at")
    list_filter = ("is_active",)
    search_fields = ("name",)
    inlines = [PaymentMethodInline]


@admin.register(PaymentMethod)
class PaymentMethodAdmin(admin.ModelAdmin):
    list_display = ("name", "code", "kind", "business", "display_order", "is_active")
    list_filter = ("business", "kind", "is_active")
    search_fields = ("name", "code")
    ordering = ("business", "display_order", "created_at")
