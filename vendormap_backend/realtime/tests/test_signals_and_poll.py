# realtime/tests/test_signals_and_poll.py

from __future__ import annotations

from django.contrib.auth import get_user_model
from django.test import TestCase
from rest_framework import status
from rest_framework.test import APIClient

from chats.services.chat_service import get_or_create_chat, send_message
from orders.services.order_service import place_order
from permissions.roles import ROLE_VENDOR
from products.models import Product
from realtime.feed import EVENT_DELETE, EVENT_INSERT, EVENT_UPDATE, chat_topic, reset_feed
from vendors.models import Vendor

User = get_user_model()


class RealtimeTestCase(TestCase):
    def setUp(self):
        self.feed = reset_feed()
        self.client = APIClient()
        self.owner = User.objects.create_user(
            email="owner@example.com", password="Pass1234!", role=ROLE_VENDOR
        )
        self.customer = User.objects.create_user(email="c@example.com", password="Pass1234!")
        self.stranger = User.objects.create_user(email="s@example.com", password="Pass1234!")
        with self.captureOnCommitCallbacks(execute=True):
            self.vendor = Vendor.objects.create(user=self.owner, name="Bakso")


class SignalPublishingTests(RealtimeTestCase):
    def test_vendor_lifecycle(self):
        seen = []
        self.feed.subscribe("vendors", seen.append)

        with self.captureOnCommitCallbacks(execute=True):
            self.vendor.online = True
            self.vendor.save(update_fields=["online", "updated_at"])
        with self.captureOnCommitCallbacks(execute=True):
            vendor_id = self.vendor.pk
            self.vendor.delete()

        self.assertEqual(
            [(e.event, e.id) for e in seen],
            [(EVENT_UPDATE, str(vendor_id)), (EVENT_DELETE, str(vendor_id))],
        )

    def test_nothing_published_before_commit(self):
        seen = []
        self.feed.subscribe("products", seen.append)

        with self.captureOnCommitCallbacks(execute=False) as callbacks:
            Product.objects.create(vendor=self.vendor, name="Bakso urat")

        self.assertEqual(seen, [])
        self.assertEqual(len(callbacks), 1)

    def test_order_audience(self):
        with self.captureOnCommitCallbacks(execute=True):
            order = place_order(buyer=self.customer, vendor=self.vendor, items="2x bakso")

        events, _, _ = self.feed.changes_since("orders", 0, user_id=str(self.owner.pk))
        self.assertEqual([(e.event, e.id) for e in events], [(EVENT_INSERT, str(order.pk))])
        self.assertEqual(self.feed.changes_since("orders", 0, user_id=str(self.stranger.pk))[0], [])

    def test_message_published_to_both_message_topics(self):
        with self.captureOnCommitCallbacks(execute=True):
            chat, _ = get_or_create_chat(user=self.customer, vendor=self.vendor)
        with self.captureOnCommitCallbacks(execute=True):
            message = send_message(chat=chat, sender=self.customer, text="halo")

        uid = str(self.owner.pk)
        for topic in ("messages", chat_topic(chat.pk)):
            events, _, _ = self.feed.changes_since(topic, 0, user_id=uid)
            self.assertEqual([e.id for e in events], [str(message.pk)])


class RealtimePollTests(RealtimeTestCase):
    def test_public_topic_without_auth(self):
        cursor = self.feed.cursor
        with self.captureOnCommitCallbacks(execute=True):
            product = Product.objects.create(vendor=self.vendor, name="Bakso urat")

        res = self.client.get("/api/realtime/products/", {"since": cursor})

        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertFalse(res.data["reset"])
        self.assertEqual(res.data["cursor"], cursor + 1)
        self.assertEqual(
            res.data["events"],
            [{"seq": cursor + 1, "topic": "products", "event": EVENT_INSERT, "id": str(product.pk)}],
        )

    def test_private_topic_requires_auth(self):
        res = self.client.get("/api/realtime/orders/")

        self.assertEqual(res.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_private_topic_filters_by_caller(self):
        with self.captureOnCommitCallbacks(execute=True):
            place_order(buyer=self.customer, vendor=self.vendor, items="1x bakso")

        self.client.force_authenticate(self.customer)
        self.assertEqual(len(self.client.get("/api/realtime/orders/").data["events"]), 1)

        self.client.force_authenticate(self.stranger)
        self.assertEqual(self.client.get("/api/realtime/orders/").data["events"], [])

    def test_chat_topic_is_participants_only(self):
        with self.captureOnCommitCallbacks(execute=True):
            chat, _ = get_or_create_chat(user=self.customer, vendor=self.vendor)
        url = f"/api/realtime/{chat_topic(chat.pk)}/"

        self.client.force_authenticate(self.customer)
        self.assertEqual(self.client.get(url).status_code, status.HTTP_200_OK)

        self.client.force_authenticate(self.stranger)
        self.assertEqual(self.client.get(url).status_code, status.HTTP_404_NOT_FOUND)

        self.assertEqual(
            self.client.get("/api/realtime/messages:not-a-uuid/").status_code,
            status.HTTP_404_NOT_FOUND,
        )

    def test_unknown_topic(self):
        res = self.client.get("/api/realtime/payments/")

        self.assertEqual(res.status_code, status.HTTP_404_NOT_FOUND)

    def test_negative_cursor_rejected(self):
        res = self.client.get("/api/realtime/vendors/", {"since": -1})

        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)
