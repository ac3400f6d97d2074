# chats/services/chat_service.py

from __future__ import annotations

import logging

from django.db import transaction
from django.utils import timezone

from chats.models import Chat, Message
from chats.services.exceptions import SelfChatError, VendorWithoutOwnerError
from vendors.models import Vendor

logger = logging.getLogger(__name__)


@transaction.atomic
def get_or_create_chat(*, user, vendor) -> tuple[Chat, bool]:
    """
    One chat per (customer, vendor) pair.
    Returns (chat, created).
    """
    owner = vendor.user
    if owner is None:
        raise VendorWithoutOwnerError("This vendor cannot receive messages")
    if owner.pk == user.pk:
        raise SelfChatError("You cannot open a chat with your own vendor")

    # Serializes concurrent opens for this vendor so the pair gets one chat.
    Vendor.objects.select_for_update().only("pk").get(pk=vendor.pk)

    existing = (
        Chat.objects.filter(vendor=vendor, participants=user)
        .filter(participants=owner)
        .first()
    )
    if existing is not None:
        return existing, False

    chat = Chat.objects.create(vendor=vendor)
    chat.participants.add(user, owner)

    logger.info("Chat opened", extra={"chat_id": str(chat.id), "vendor_id": str(vendor.id)})
    return chat, True


@transaction.atomic
def send_message(*, chat: Chat, sender, text: str) -> Message:
    message = Message.objects.create(chat=chat, sender=sender, text=text.strip())

    chat.last_updated = timezone.now()
    chat.save(update_fields=["last_updated"])

    return message
