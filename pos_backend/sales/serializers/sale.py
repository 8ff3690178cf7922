# sales/serializers/sale.py

from rest_framework import serializers

from sales.models import Sale


class SaleLineItemSerializer(serializers.Serializer):
    """
    Frozen line snapshot (read-only). Never a live catalog reference.
    """

    product_id = serializers.CharField()
    product_name = serializers.CharField()
    quantity = serializers.IntegerField()
    unit_price = serializers.DecimalField(max_digits=10, decimal_places=2)
    total = serializers.DecimalField(max_digits=12, decimal_places=2)
    notes = serializers.CharField(allow_blank=True, required=False)


class SaleSerializer(serializers.ModelSerializer):
    """
    Sales history / receipt payload.
    """

    items = SaleLineItemSerializer(many=True, read_only=True)
    cashier_email = serializers.EmailField(source="user.email", read_only=True, default=None)
    is_inventory_pending = serializers.BooleanField(read_only=True)

    class Meta:
        model = Sale
        fields = [
            "id",
            "order_number",
            "business",
            "user",
            "cashier_email",
            "items",
            "subtotal",
            "discount",
            "total",
            "payment_method",
            "payment_details",
            "status",
            "order_type",
            "created_from",
            "customer_name",
            "is_inventory_pending",
            "inventory_settled_at",
            "inventory_settlement_error",
            "created_at",
        ]
        read_only_fields = fields


class OrderNumberPreviewSerializer(serializers.Serializer):
    next_order_number = serializers.CharField()
    reserved = serializers.BooleanField()
