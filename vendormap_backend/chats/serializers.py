# chats/serializers.py

from rest_framework import serializers

from chats.models import Chat, Message


class MessageSerializer(serializers.ModelSerializer):
    chat_id = serializers.UUIDField(read_only=True)
    from_user = serializers.UUIDField(source="sender_id", read_only=True, allow_null=True)

    class Meta:
        model = Message
        fields = ["id", "chat_id", "from_user", "text", "created_at"]
        read_only_fields = ["id", "chat_id", "from_user", "created_at"]

    def validate_text(self, value):
        value = (value or "").strip()
        if not value:
            raise serializers.ValidationError("Message text is required")
        return value


class ChatSerializer(serializers.ModelSerializer):
    participants = serializers.SerializerMethodField()
    vendor = serializers.UUIDField(source="vendor_id", read_only=True, allow_null=True)
    vendor_name = serializers.SerializerMethodField()

    class Meta:
        model = Chat
        fields = ["id", "participants", "vendor", "vendor_name", "last_updated", "created_at"]
        read_only_fields = fields

    def get_participants(self, obj):
        return [str(user.pk) for user in obj.participants.all()]

    def get_vendor_name(self, obj):
        return obj.vendor.name if obj.vendor_id else None


class ChatCreateSerializer(serializers.Serializer):
    vendor_id = serializers.UUIDField()
