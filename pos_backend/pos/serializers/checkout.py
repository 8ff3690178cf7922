# pos/serializers/checkout.py

from rest_framework import serializers

# raw operator text; "9999999999.99" plus room for separators
MAX_AMOUNT_INPUT_LENGTH = 15
MAX_SPLIT_SLOTS = 20


class SplitSlotInputSerializer(serializers.Serializer):
    method_code = serializers.CharField(required=False, allow_blank=True, default="")
    # raw operator text; sanitized by the payment plan
    amount = serializers.CharField(
        required=False,
        allow_blank=True,
        default="",
        max_length=MAX_AMOUNT_INPUT_LENGTH,
    )


class PaymentPlanInputSerializer(serializers.Serializer):
    split = serializers.BooleanField(required=False, default=False)
    method_code = serializers.CharField(required=False, allow_blank=True, default="")
    amount_received = serializers.CharField(
        required=False,
        allow_blank=True,
        default="",
        max_length=MAX_AMOUNT_INPUT_LENGTH,
    )
    slots = SplitSlotInputSerializer(
        many=True,
        required=False,
        default=list,
        max_length=MAX_SPLIT_SLOTS,
    )


class PaymentPlanStateSerializer(serializers.Serializer):
    total = serializers.DecimalField(max_digits=12, decimal_places=2)
    split = serializers.BooleanField()
    amount_received = serializers.CharField()
    # not bounded to the money columns: an invalid plan still reports what was entered
    change = serializers.DecimalField(max_digits=None, decimal_places=2)
    split_total_entered = serializers.DecimalField(max_digits=None, decimal_places=2)
    can_complete = serializers.BooleanField()
    errors = serializers.ListField(child=serializers.CharField())


class CheckoutResultSerializer(serializers.Serializer):
    sale_id = serializers.UUIDField(source="sale.id")
    order_number = serializers.CharField()
    total = serializers.DecimalField(max_digits=12, decimal_places=2)
    change = serializers.DecimalField(max_digits=None, decimal_places=2)
    payment_method = serializers.CharField(source="sale.payment_method")
    payment_details = serializers.JSONField(source="sale.payment_details")
    inventory_pending = serializers.BooleanField()
    warning = serializers.SerializerMethodField()

    def get_warning(self, obj) -> str:
        if obj.inventory_pending:
            return "Sale recorded. Stock will be updated once inventory settlement is retried."
        return ""
