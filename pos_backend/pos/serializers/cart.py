# pos/serializers/cart.py

"""
CART SERIALIZERS

Purpose:
- Return the in-memory cart in a frontend-friendly shape.
- Totals are computed server-side (never trusted from the client).
"""

from rest_framework import serializers

MAX_LINE_QUANTITY = 9999


class CartLineSerializer(serializers.Serializer):
    id = serializers.CharField(read_only=True)
    product_id = serializers.CharField(read_only=True)
    name = serializers.CharField(read_only=True)
    unit_price = serializers.DecimalField(max_digits=10, decimal_places=2, read_only=True)
    quantity = serializers.IntegerField(read_only=True)
    line_total = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)
    note = serializers.CharField(read_only=True)
    added_since_last_view = serializers.IntegerField(read_only=True)


class CartSerializer(serializers.Serializer):
    lines = CartLineSerializer(many=True, read_only=True)
    item_count = serializers.IntegerField(read_only=True)
    total = serializers.SerializerMethodField()

    def get_total(self, obj) -> str:
        # string to avoid float serialization issues
        return f"{obj.total():.2f}"


# =====================================================
# INPUT
# =====================================================

class AddCartItemInputSerializer(serializers.Serializer):
    product_id = serializers.UUIDField()
    # values below 1 are treated as 1 by the cart
    quantity = serializers.IntegerField(
        required=False,
        default=1,
        min_value=-MAX_LINE_QUANTITY,
        max_value=MAX_LINE_QUANTITY,
    )


class UpdateCartItemInputSerializer(serializers.Serializer):
    # 0 or less removes the line
    quantity = serializers.IntegerField(
        min_value=-MAX_LINE_QUANTITY,
        max_value=MAX_LINE_QUANTITY,
    )


class CartItemNoteInputSerializer(serializers.Serializer):
    note = serializers.CharField(allow_blank=True, trim_whitespace=False)
