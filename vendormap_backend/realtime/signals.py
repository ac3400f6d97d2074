# realtime/signals.py

"""
MODEL SIGNALS -> CHANGE FEED

Every write to a watched model publishes one notification after the
surrounding transaction commits (rolled-back writes publish nothing).

Topics:
- vendors, products            public
- orders                       buyer + vendor owner
- chats, messages, messages:<chat_id>   chat participants
"""

from __future__ import annotations

import logging

from django.db import transaction
from django.db.models.signals import post_delete, post_save
from django.dispatch import receiver

from chats.models import Chat, Message
from orders.models import Order
from products.models import Product
from realtime.feed import EVENT_DELETE, EVENT_INSERT, EVENT_UPDATE, chat_topic, get_feed
from vendors.models import Vendor

logger = logging.getLogger(__name__)


def _order_audience(order):
    vendor_owner = Vendor.objects.filter(pk=order.vendor_id).values_list("user_id", flat=True).first()
    return [order.buyer_id, vendor_owner]


def _chat_audience(chat_id):
    return list(Chat.participants.through.objects.filter(chat_id=chat_id).values_list("user_id", flat=True))


def _publish_on_commit(topics, event, obj_id, audience_fn=None):
    def _send():
        audience = audience_fn() if audience_fn is not None else None
        feed = get_feed()
        for topic in topics:
            feed.publish(topic, event, obj_id, audience=audience)

    transaction.on_commit(_send)


def _save_event(created: bool) -> str:
    return EVENT_INSERT if created else EVENT_UPDATE


@receiver(post_save, sender=Vendor, dispatch_uid="realtime_vendor_saved")
def vendor_saved(sender, instance, created, **kwargs):
    _publish_on_commit(["vendors"], _save_event(created), instance.pk)


@receiver(post_delete, sender=Vendor, dispatch_uid="realtime_vendor_deleted")
def vendor_deleted(sender, instance, **kwargs):
    _publish_on_commit(["vendors"], EVENT_DELETE, instance.pk)


@receiver(post_save, sender=Product, dispatch_uid="realtime_product_saved")
def product_saved(sender, instance, created, **kwargs):
    _publish_on_commit(["products"], _save_event(created), instance.pk)


@receiver(post_delete, sender=Product, dispatch_uid="realtime_product_deleted")
def product_deleted(sender, instance, **kwargs):
    _publish_on_commit(["products"], EVENT_DELETE, instance.pk)


@receiver(post_save, sender=Order, dispatch_uid="realtime_order_saved")
def order_saved(sender, instance, created, **kwargs):
    _publish_on_commit(
        ["orders"], _save_event(created), instance.pk, lambda: _order_audience(instance)
    )


@receiver(post_save, sender=Chat, dispatch_uid="realtime_chat_saved")
def chat_saved(sender, instance, created, **kwargs):
    chat_id = instance.pk
    _publish_on_commit(
        ["chats"], _save_event(created), chat_id, lambda: _chat_audience(chat_id)
    )


@receiver(post_save, sender=Message, dispatch_uid="realtime_message_saved")
def message_saved(sender, instance, created, **kwargs):
    if not created:
        return
    chat_id = instance.chat_id
    _publish_on_commit(
        ["messages", chat_topic(chat_id)],
        EVENT_INSERT,
        instance.pk,
        lambda: _chat_audience(chat_id),
    )
