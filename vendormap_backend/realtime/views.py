# realtime/views.py

"""
REALTIME POLLING ENDPOINT

GET /api/realtime/<topic>/?since=<cursor>

200 {"topic", "cursor", "reset", "events": [{"seq", "topic", "event", "id"}]}

- vendors, products: public
- orders, chats, messages: authenticated; only events the caller may see
- messages:<chat_id>: chat participants only (404 otherwise)

Clients keep the returned cursor and send it back as `since`.
"""

from __future__ import annotations

from django.core.exceptions import ValidationError as DjangoValidationError
from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema
from rest_framework import serializers
from rest_framework.exceptions import NotAuthenticated, NotFound
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.throttling import UserRateThrottle
from rest_framework.views import APIView

from chats.models import Chat
from realtime.feed import CHAT_TOPIC_PREFIX, PUBLIC_TOPICS, get_feed, is_known_topic


class RealtimePollThrottle(UserRateThrottle):
    scope = "realtime_poll"


class PollQuerySerializer(serializers.Serializer):
    since = serializers.IntegerField(min_value=0, required=False, default=0)


def _is_chat_participant(topic: str, user) -> bool:
    chat_id = topic[len(CHAT_TOPIC_PREFIX):]
    try:
        chat = Chat.objects.filter(pk=chat_id).first()
    except (DjangoValidationError, ValueError):
        return False
    return chat is not None and chat.has_participant(user)


class RealtimePollView(APIView):
    permission_classes = [AllowAny]
    throttle_classes = [RealtimePollThrottle]

    @extend_schema(
        tags=["Realtime"],
        parameters=[
            OpenApiParameter(name="since", type=int, location=OpenApiParameter.QUERY, required=False),
        ],
        responses={
            200: OpenApiResponse(description="{topic, cursor, reset, events}"),
            401: OpenApiResponse(description="Private topic without credentials"),
            404: OpenApiResponse(description="Unknown topic or chat not visible"),
        },
        description="Change notifications on a topic after the given cursor.",
    )
    def get(self, request, topic):
        if not is_known_topic(topic):
            raise NotFound("Unknown topic")

        user = request.user
        if topic not in PUBLIC_TOPICS:
            if not user or not user.is_authenticated:
                raise NotAuthenticated()
            if topic.startswith(CHAT_TOPIC_PREFIX) and not _is_chat_participant(topic, user):
                raise NotFound("Chat not found")

        query = PollQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)

        user_id = str(user.pk) if user and user.is_authenticated else None
        events, cursor, reset = get_feed().changes_since(
            topic, query.validated_data["since"], user_id=user_id
        )

        return Response(
            {
                "topic": topic,
                "cursor": cursor,
                "reset": reset,
                "events": [e.as_dict() for e in events],
            }
        )
