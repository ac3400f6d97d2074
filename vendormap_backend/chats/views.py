# chats/views.py

"""
CHAT ENDPOINTS (participants only)

- GET  /api/chats/                   my chats, newest activity first
- POST /api/chats/                   {vendor_id} -> get-or-create (201 new, 200 existing)
- GET  /api/chats/<id>/
- GET  /api/chats/<id>/messages/     oldest first
- POST /api/chats/<id>/messages/     {text}

Non-participants get 404 (chat existence is not revealed).
"""

from __future__ import annotations

from django.shortcuts import get_object_or_404
from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from chats.models import Chat
from chats.serializers import ChatCreateSerializer, ChatSerializer, MessageSerializer
from chats.services.chat_service import get_or_create_chat, send_message
from chats.services.exceptions import ChatError
from vendors.models import Vendor


class ChatViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    viewsets.GenericViewSet,
):
    serializer_class = ChatSerializer
    permission_classes = [IsAuthenticated]
    pagination_class = None

    def get_queryset(self):
        return (
            Chat.objects.filter(participants=self.request.user)
            .select_related("vendor")
            .prefetch_related("participants")
            .order_by("-last_updated")
        )

    @extend_schema(
        tags=["Chats"],
        request=ChatCreateSerializer,
        responses={
            200: ChatSerializer,
            201: ChatSerializer,
            400: OpenApiResponse(description="Vendor cannot be chatted with"),
            404: OpenApiResponse(description="Vendor not found"),
        },
    )
    def create(self, request):
        serializer = ChatCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        vendor = get_object_or_404(
            Vendor.objects.select_related("user"), pk=serializer.validated_data["vendor_id"]
        )

        try:
            chat, created = get_or_create_chat(user=request.user, vendor=vendor)
        except ChatError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(
            ChatSerializer(chat).data,
            status=status.HTTP_201_CREATED if created else status.HTTP_200_OK,
        )

    @extend_schema(
        tags=["Chats"],
        methods=["GET"],
        responses={200: MessageSerializer(many=True)},
    )
    @extend_schema(
        tags=["Chats"],
        methods=["POST"],
        request=MessageSerializer,
        responses={201: MessageSerializer},
    )
    @action(detail=True, methods=["get", "post"], url_path="messages")
    def messages(self, request, pk=None):
        chat = self.get_object()

        if request.method == "GET":
            qs = chat.messages.order_by("created_at")
            return Response(MessageSerializer(qs, many=True).data)

        serializer = MessageSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        message = send_message(
            chat=chat,
            sender=request.user,
            text=serializer.validated_data["text"],
        )
        return Response(MessageSerializer(message).data, status=status.HTTP_201_CREATED)
