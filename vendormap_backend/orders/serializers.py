# orders/serializers.py

from rest_framework import serializers

from orders.models import Order


class OrderSerializer(serializers.ModelSerializer):
    vendor = serializers.UUIDField(source="vendor_id", read_only=True)
    vendor_name = serializers.CharField(source="vendor.name", read_only=True)
    buyer = serializers.UUIDField(source="buyer_id", read_only=True, allow_null=True)

    class Meta:
        model = Order
        fields = [
            "id",
            "vendor",
            "vendor_name",
            "buyer",
            "buyer_name",
            "items",
            "note",
            "status",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class OrderCreateSerializer(serializers.Serializer):
    vendor_id = serializers.UUIDField()
    items = serializers.CharField(max_length=2000)
    note = serializers.CharField(required=False, allow_blank=True, default="", max_length=2000)

    def validate_items(self, value):
        value = (value or "").strip()
        if not value:
            raise serializers.ValidationError("Items are required")
        return value


class OrderStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(
        choices=[
            Order.STATUS_ACCEPTED,
            Order.STATUS_REJECTED,
            Order.STATUS_CANCELLED,
            Order.STATUS_COMPLETED,
        ]
    )
