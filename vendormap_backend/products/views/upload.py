# products/views/upload.py

"""
PRODUCT UPLOAD ENDPOINTS (multipart)

POST /api/upload-product  (also /upload-product)
  fields: name (required), price, description, file (optional image)
  200 {"success": true, "product": {...}, "imageUrl": <url|null>}

POST /api/upload-only     (also /upload-only)
  fields: file (required)
  200 {"path": "<storage path>", "imageUrl": "<url>"}

Errors are {"error": "<message>"} like the presence endpoint, and the
caller is resolved from the bearer token the same way.
"""

from __future__ import annotations

import logging

from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.parsers import FormParser, MultiPartParser
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.throttling import UserRateThrottle
from rest_framework.views import APIView

from products.serializers import ProductSerializer
from products.services.exceptions import ProductUploadError
from products.services.uploads import (
    create_product_from_upload,
    store_product_image,
    vendor_for_user,
)
from vendors.services.bearer import authenticate_bearer
from vendors.services.exceptions import Unauthenticated

logger = logging.getLogger(__name__)


class UploadThrottle(UserRateThrottle):
    scope = "upload"


class _UploadView(APIView):
    authentication_classes = []
    permission_classes = [AllowAny]
    parser_classes = [MultiPartParser, FormParser]
    throttle_classes = [UploadThrottle]

    def handle_upload(self, request, vendor):
        raise NotImplementedError

    def post(self, request):
        try:
            user = authenticate_bearer(request)
            vendor = vendor_for_user(user)
            return self.handle_upload(request, vendor)
        except (Unauthenticated, ProductUploadError) as exc:
            return Response({"error": exc.message}, status=exc.status_code)


class UploadProductView(_UploadView):
    @extend_schema(
        tags=["Products"],
        request={
            "multipart/form-data": {
                "type": "object",
                "properties": {
                    "name": {"type": "string"},
                    "price": {"type": "string"},
                    "description": {"type": "string"},
                    "file": {"type": "string", "format": "binary"},
                },
                "required": ["name"],
            }
        },
        responses={
            200: OpenApiResponse(description="{success, product, imageUrl}"),
            400: OpenApiResponse(description="Missing name, bad price or file too large"),
            401: OpenApiResponse(description="Missing or invalid token"),
            403: OpenApiResponse(description="Caller is not a vendor"),
        },
        description="Create a product for the caller's vendor, optionally with an image.",
    )
    def post(self, request):
        return super().post(request)

    def handle_upload(self, request, vendor):
        product, image_url = create_product_from_upload(
            vendor=vendor,
            name=request.data.get("name"),
            price=request.data.get("price"),
            description=request.data.get("description", ""),
            upload=request.FILES.get("file"),
        )
        return Response(
            {
                "success": True,
                "product": ProductSerializer(product).data,
                "imageUrl": image_url,
            },
            status=status.HTTP_200_OK,
        )


class UploadOnlyView(_UploadView):
    @extend_schema(
        tags=["Products"],
        request={
            "multipart/form-data": {
                "type": "object",
                "properties": {"file": {"type": "string", "format": "binary"}},
                "required": ["file"],
            }
        },
        responses={
            200: OpenApiResponse(description="{path, imageUrl}"),
            400: OpenApiResponse(description="File missing or too large"),
            401: OpenApiResponse(description="Missing or invalid token"),
        },
        description="Store an image under the caller's vendor folder without creating a product.",
    )
    def post(self, request):
        return super().post(request)

    def handle_upload(self, request, vendor):
        path, image_url = store_product_image(vendor=vendor, upload=request.FILES.get("file"))
        return Response({"path": path, "imageUrl": image_url}, status=status.HTTP_200_OK)
