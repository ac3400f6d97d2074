# vendors/views/vendor.py

"""
VENDOR VIEWSET

Public (map):
- GET /api/vendors/?q=&online=&lat=&lng=&radius_km=
- GET /api/vendors/<id>/
- GET /api/vendors/<id>/products/

Owner only:
- PATCH /api/vendors/<id>/            (name, description, photo_url)
- POST  /api/vendors/<id>/location/   (share current position)

Authenticated vendor:
- GET /api/vendors/me/

Radius search:
- lat + lng switch it on (radius_km defaults to VENDOR_MAP_DEFAULT_RADIUS_KM)
- vendors without a location are excluded
- results carry distance_m and are ordered nearest first
"""

from __future__ import annotations

import logging

from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema
from django.db.models import Q
from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response

from permissions.roles import IsVendorOwnerOrReadOnly
from products.serializers import ProductSerializer
from vendors.filters import VendorFilter
from vendors.models import Vendor
from vendors.serializers import (
    NearbyQuerySerializer,
    VendorLocationSerializer,
    VendorProfileSerializer,
    VendorSerializer,
)
from vendors.services.geo import bounding_box, haversine_m

logger = logging.getLogger(__name__)


class VendorViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    mixins.UpdateModelMixin,
    viewsets.GenericViewSet,
):
    queryset = Vendor.objects.all()
    serializer_class = VendorSerializer
    permission_classes = [IsVendorOwnerOrReadOnly]
    filterset_class = VendorFilter
    # The map renders every marker at once.
    pagination_class = None

    def get_serializer_class(self):
        if self.action in ("update", "partial_update"):
            return VendorProfileSerializer
        return VendorSerializer

    def get_permissions(self):
        if self.action == "me":
            return [IsAuthenticated()]
        if self.action in ("list", "retrieve", "products"):
            return [AllowAny()]
        return [IsAuthenticated(), IsVendorOwnerOrReadOnly()]

    def _nearby_params(self, request):
        if "lat" not in request.query_params and "lng" not in request.query_params:
            return None
        serializer = NearbyQuerySerializer(data=request.query_params)
        serializer.is_valid(raise_exception=True)
        return serializer.validated_data

    @extend_schema(
        tags=["Vendors"],
        parameters=[
            OpenApiParameter(name="q", type=str, location=OpenApiParameter.QUERY, required=False),
            OpenApiParameter(name="online", type=bool, location=OpenApiParameter.QUERY, required=False),
            OpenApiParameter(name="lat", type=float, location=OpenApiParameter.QUERY, required=False),
            OpenApiParameter(name="lng", type=float, location=OpenApiParameter.QUERY, required=False),
            OpenApiParameter(
                name="radius_km",
                type=float,
                location=OpenApiParameter.QUERY,
                required=False,
                description="Search radius around lat/lng (default from settings).",
            ),
        ],
        responses={200: VendorSerializer(many=True)},
        description="Vendors for the customer map.",
    )
    def list(self, request, *args, **kwargs):
        qs = self.filter_queryset(self.get_queryset())
        nearby = self._nearby_params(request)

        if nearby is None:
            return Response(self.get_serializer(qs, many=True).data)

        lat, lng = nearby["lat"], nearby["lng"]
        radius_m = nearby["radius_km"] * 1000
        min_lat, max_lat, lng_ranges = bounding_box(lat, lng, radius_m)

        in_lng = Q()
        for min_lng, max_lng in lng_ranges:
            in_lng |= Q(longitude__gte=min_lng, longitude__lte=max_lng)

        candidates = qs.filter(
            in_lng,
            latitude__isnull=False,
            longitude__isnull=False,
            latitude__gte=min_lat,
            latitude__lte=max_lat,
        )

        matches = []
        for vendor in candidates:
            distance = haversine_m(lat, lng, vendor.latitude, vendor.longitude)
            if distance <= radius_m:
                vendor.distance_m = distance
                matches.append(vendor)

        matches.sort(key=lambda v: v.distance_m)
        return Response(self.get_serializer(matches, many=True).data)

    @extend_schema(tags=["Vendors"], responses={200: VendorSerializer})
    def update(self, request, *args, **kwargs):
        partial = kwargs.pop("partial", False)
        vendor = self.get_object()
        serializer = VendorProfileSerializer(vendor, data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        logger.info("Vendor profile updated", extra={"vendor_id": str(vendor.id)})
        return Response(VendorSerializer(vendor).data)

    @extend_schema(
        tags=["Vendors"],
        responses={200: VendorSerializer, 404: OpenApiResponse(description="No vendor record")},
    )
    @action(detail=False, methods=["get"], url_path="me")
    def me(self, request):
        vendor = Vendor.objects.filter(user=request.user).first()
        if vendor is None:
            return Response(
                {"detail": "No vendor record for this account."},
                status=status.HTTP_404_NOT_FOUND,
            )
        return Response(VendorSerializer(vendor).data)

    @extend_schema(
        tags=["Vendors"],
        request=VendorLocationSerializer,
        responses={200: VendorSerializer},
        description="Share the vendor's current position.",
    )
    @action(detail=True, methods=["post"], url_path="location")
    def location(self, request, pk=None):
        vendor = self.get_object()
        serializer = VendorLocationSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        vendor.latitude = serializer.validated_data["latitude"]
        vendor.longitude = serializer.validated_data["longitude"]
        vendor.save(update_fields=["latitude", "longitude", "updated_at"])

        logger.info("Vendor location shared", extra={"vendor_id": str(vendor.id)})
        return Response(VendorSerializer(vendor).data)

    @extend_schema(tags=["Vendors"], responses={200: ProductSerializer(many=True)})
    @action(detail=True, methods=["get"], url_path="products")
    def products(self, request, pk=None):
        vendor = self.get_object()
        qs = vendor.products.order_by("-created_at")
        return Response(ProductSerializer(qs, many=True).data)
