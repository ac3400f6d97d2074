# vendors/serializers.py

"""
VENDOR SERIALIZERS

- VendorSerializer: public map record (also the `vendor` object of the
  presence endpoint response)
- VendorProfileSerializer: owner edits (name, description, photo)
- VendorLocationSerializer: owner shares a position (any supported shape)
- NearbyQuerySerializer: query params of the map listing
"""

from __future__ import annotations

from django.conf import settings
from rest_framework import serializers

from vendors.models import Vendor
from vendors.services.geo import parse_location


def _validate_lat_lng(lat: float, lng: float) -> None:
    if not -90 <= lat <= 90:
        raise serializers.ValidationError("Latitude must be between -90 and 90")
    if not -180 <= lng <= 180:
        raise serializers.ValidationError("Longitude must be between -180 and 180")


class VendorSerializer(serializers.ModelSerializer):
    user_id = serializers.UUIDField(read_only=True, allow_null=True)
    location = serializers.SerializerMethodField()
    distance_m = serializers.SerializerMethodField()

    class Meta:
        model = Vendor
        fields = [
            "id",
            "user_id",
            "name",
            "description",
            "photo_url",
            "online",
            "location",
            "distance_m",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields

    def get_location(self, obj):
        if not obj.has_location:
            return None
        return {"lat": obj.latitude, "lng": obj.longitude}

    def get_distance_m(self, obj):
        # Only set by the radius-filtered listing.
        distance = getattr(obj, "distance_m", None)
        return round(distance, 1) if distance is not None else None


class VendorProfileSerializer(serializers.ModelSerializer):
    class Meta:
        model = Vendor
        fields = ["name", "description", "photo_url"]

    def validate_name(self, value):
        value = (value or "").strip()
        if not value:
            raise serializers.ValidationError("Name is required")
        return value


class VendorLocationSerializer(serializers.Serializer):
    """
    Accepts {"lat", "lng"}, {"latitude", "longitude"} or a GeoJSON Point.
    Normalized to validated_data = {"latitude": float, "longitude": float}.
    """

    def to_internal_value(self, data):
        point = parse_location(data)
        if point is None:
            raise serializers.ValidationError(
                {"location": ["Provide lat/lng, latitude/longitude or a GeoJSON Point"]}
            )
        lat, lng = point
        try:
            _validate_lat_lng(lat, lng)
        except serializers.ValidationError as exc:
            raise serializers.ValidationError({"location": exc.detail}) from exc
        return {"latitude": lat, "longitude": lng}


class NearbyQuerySerializer(serializers.Serializer):
    lat = serializers.FloatField(min_value=-90, max_value=90)
    lng = serializers.FloatField(min_value=-180, max_value=180)
    radius_km = serializers.FloatField(min_value=0, required=False)

    def validate(self, attrs):
        if attrs.get("radius_km") is None:
            attrs["radius_km"] = settings.VENDOR_MAP_DEFAULT_RADIUS_KM
        return attrs
