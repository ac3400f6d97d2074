# orders/views/order.py

"""
ORDER VIEWSET

- GET  /api/orders/               orders I placed + orders to my vendor (?status=)
- POST /api/orders/               {vendor_id, items, note} (any authenticated user)
- GET  /api/orders/<id>/
- POST /api/orders/<id>/status/   {status}
    vendor side: accepted | rejected | completed
    buyer side:  cancelled
"""

from __future__ import annotations

from django.db.models import Q
from django.shortcuts import get_object_or_404
from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema
from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from orders.models import Order
from orders.serializers import (
    OrderCreateSerializer,
    OrderSerializer,
    OrderStatusSerializer,
)
from orders.services.exceptions import (
    InvalidOrderTransitionError,
    OrderPermissionError,
    SelfOrderError,
)
from orders.services.order_service import change_status, place_order
from vendors.models import Vendor


class OrderViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    mixins.CreateModelMixin,
    viewsets.GenericViewSet,
):
    serializer_class = OrderSerializer
    permission_classes = [IsAuthenticated]

    def get_queryset(self):
        user = self.request.user
        qs = Order.objects.select_related("vendor").filter(
            Q(buyer=user) | Q(vendor__user=user)
        )

        status_param = (self.request.query_params.get("status") or "").strip()
        if status_param:
            qs = qs.filter(status=status_param)

        return qs.order_by("-created_at")

    @extend_schema(
        tags=["Orders"],
        parameters=[
            OpenApiParameter(name="status", type=str, location=OpenApiParameter.QUERY, required=False),
        ],
    )
    def list(self, request, *args, **kwargs):
        return super().list(request, *args, **kwargs)

    @extend_schema(
        tags=["Orders"],
        request=OrderCreateSerializer,
        responses={201: OrderSerializer, 400: OpenApiResponse(description="Validation error")},
    )
    def create(self, request, *args, **kwargs):
        serializer = OrderCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        vendor = get_object_or_404(Vendor, pk=data["vendor_id"])

        try:
            order = place_order(
                buyer=request.user,
                vendor=vendor,
                items=data["items"],
                note=data.get("note", ""),
            )
        except SelfOrderError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(OrderSerializer(order).data, status=status.HTTP_201_CREATED)

    @extend_schema(
        tags=["Orders"],
        request=OrderStatusSerializer,
        responses={
            200: OrderSerializer,
            400: OpenApiResponse(description="Transition not allowed"),
            403: OpenApiResponse(description="Wrong side for this status"),
            404: OpenApiResponse(description="Order not found"),
        },
    )
    @action(detail=True, methods=["post"], url_path="status")
    def set_status(self, request, pk=None):
        # Visibility check first: strangers get 404, not 403.
        self.get_object()

        serializer = OrderStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            order = change_status(
                order_id=pk,
                user=request.user,
                target_status=serializer.validated_data["status"],
            )
        except OrderPermissionError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_403_FORBIDDEN)
        except InvalidOrderTransitionError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(OrderSerializer(order).data, status=status.HTTP_200_OK)
