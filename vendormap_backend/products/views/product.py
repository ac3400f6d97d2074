# products/views/product.py

"""
PRODUCT VIEWSET

- Anyone may browse (?vendor=<uuid>&q=<text>)
- Vendors create products for their own vendor record
- Only the owning vendor may edit/delete
"""

from django.db.models import Q
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import viewsets
from rest_framework.exceptions import PermissionDenied
from rest_framework.permissions import AllowAny, IsAuthenticated

from permissions.roles import IsVendor, IsVendorOwnerOrReadOnly
from products.models import Product
from products.serializers import ProductSerializer


class ProductViewSet(viewsets.ModelViewSet):
    serializer_class = ProductSerializer

    def get_permissions(self):
        if self.action in ("list", "retrieve"):
            return [AllowAny()]
        return [IsAuthenticated(), IsVendor(), IsVendorOwnerOrReadOnly()]

    def get_queryset(self):
        qs = Product.objects.select_related("vendor")

        vendor_id = (self.request.query_params.get("vendor") or "").strip()
        if vendor_id:
            qs = qs.filter(vendor_id=vendor_id)

        q = (self.request.query_params.get("q") or "").strip()
        if q:
            qs = qs.filter(Q(name__icontains=q) | Q(description__icontains=q))

        return qs.order_by("-created_at")

    @extend_schema(
        tags=["Products"],
        parameters=[
            OpenApiParameter(name="vendor", type=str, location=OpenApiParameter.QUERY, required=False),
            OpenApiParameter(name="q", type=str, location=OpenApiParameter.QUERY, required=False),
        ],
    )
    def list(self, request, *args, **kwargs):
        return super().list(request, *args, **kwargs)

    def perform_create(self, serializer):
        vendor = getattr(self.request.user, "vendor_profile", None)
        if vendor is None:
            raise PermissionDenied("Only vendors can create products.")
        serializer.save(vendor=vendor)
