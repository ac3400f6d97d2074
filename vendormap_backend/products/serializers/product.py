# products/serializers/product.py

"""
PRODUCT SERIALIZER

- vendor is never writable: it is always the caller's own vendor record
- price is optional, non-negative when present
"""

from rest_framework import serializers

from products.models import Product


class ProductSerializer(serializers.ModelSerializer):
    vendor = serializers.UUIDField(source="vendor_id", read_only=True)
    vendor_name = serializers.CharField(source="vendor.name", read_only=True)

    class Meta:
        model = Product
        fields = [
            "id",
            "vendor",
            "vendor_name",
            "name",
            "description",
            "price",
            "image_url",
            "created_at",
            "updated_at",
        ]
        read_only_fields = [
            "id",
            "created_at",
            "updated_at",
        ]

    def validate_name(self, value):
        value = (value or "").strip()
        if not value:
            raise serializers.ValidationError("Name is required")
        return value

    def validate_price(self, value):
        if value is not None and value < 0:
            raise serializers.ValidationError("Price must be non-negative")
        return value
