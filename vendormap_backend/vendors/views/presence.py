# vendors/views/presence.py

"""
VENDOR PRESENCE ENDPOINT

POST /api/vendor/<id>/online   (also served at /vendor/<id>/online)

Header: Authorization: Bearer <access token>
Body (optional JSON): {"online": true|false}
  - absent -> the server flips the stored flag

200 {"ok": true, "online": <bool>, "vendor": {...}}
400/401/403/404/500 {"error": "<short message>"}

Authentication is resolved here (not by DRF) so every failure keeps the
{"error": ...} body shape the map client expects.
"""

from __future__ import annotations

import logging

from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.exceptions import ParseError, UnsupportedMediaType
from rest_framework.parsers import JSONParser
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.throttling import UserRateThrottle
from rest_framework.views import APIView

from vendors.serializers import VendorSerializer
from vendors.services.bearer import authenticate_bearer
from vendors.services.exceptions import PresenceError, Unexpected
from vendors.services.presence import MALFORMED_BODY, update_presence

logger = logging.getLogger(__name__)


class PresenceThrottle(UserRateThrottle):
    """
    Uses REST_FRAMEWORK['DEFAULT_THROTTLE_RATES']['presence'].
    Keyed by client IP (the view does not populate request.user).
    """
    scope = "presence"


def _read_body(request):
    try:
        return request.data
    except (ParseError, UnsupportedMediaType):
        return MALFORMED_BODY


class VendorPresenceView(APIView):
    authentication_classes = []
    permission_classes = [AllowAny]
    parser_classes = [JSONParser]
    throttle_classes = [PresenceThrottle]

    @extend_schema(
        tags=["Vendors"],
        request={
            "application/json": {
                "type": "object",
                "properties": {"online": {"type": "boolean"}},
            }
        },
        responses={
            200: OpenApiResponse(description="{ok, online, vendor}"),
            400: OpenApiResponse(description="Malformed body"),
            401: OpenApiResponse(description="Missing or invalid token"),
            403: OpenApiResponse(description="Not the owner of this vendor"),
            404: OpenApiResponse(description="Vendor not found"),
            500: OpenApiResponse(description="Storage failure"),
        },
        description="Set (or flip, when `online` is omitted) the vendor's presence flag.",
    )
    def post(self, request, vendor_id):
        payload = _read_body(request)

        try:
            caller = authenticate_bearer(request)
            vendor = update_presence(vendor_id=vendor_id, caller=caller, payload=payload)
        except PresenceError as exc:
            return Response({"error": exc.message}, status=exc.status_code)
        except Exception:
            logger.exception("Presence update crashed", extra={"vendor_id": str(vendor_id)})
            exc = Unexpected()
            return Response({"error": exc.message}, status=exc.status_code)

        return Response(
            {
                "ok": True,
                "online": vendor.online,
                "vendor": VendorSerializer(vendor).data,
            },
            status=status.HTTP_200_OK,
        )
