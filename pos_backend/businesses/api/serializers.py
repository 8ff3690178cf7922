# businesses/api/serializers.py

from rest_framework import serializers


class PaymentMethodOptionSerializer(serializers.Serializer):
    code = serializers.CharField()
    name = serializers.CharField()
    kind = serializers.CharField()
    color = serializers.CharField(allow_blank=True)
    icon = serializers.CharField(allow_blank=True)
    accepts_tender = serializers.BooleanField(source="capability.accepts_tender")
