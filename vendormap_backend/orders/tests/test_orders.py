# orders/tests/test_orders.py

from __future__ import annotations

from django.contrib.auth import get_user_model
from django.test import TestCase
from rest_framework import status
from rest_framework.test import APIClient

from orders.models import Order
from orders.services.exceptions import InvalidOrderTransitionError, OrderPermissionError
from orders.services.order_lifecycle import can_transition, validate_transition
from permissions.roles import ROLE_VENDOR
from vendors.models import Vendor

User = get_user_model()


class OrderLifecycleRuleTests(TestCase):
    def setUp(self):
        self.owner = User.objects.create_user(
            email="owner@example.com", password="Pass1234!", role=ROLE_VENDOR
        )
        self.buyer = User.objects.create_user(email="buyer@example.com", password="Pass1234!")
        self.vendor = Vendor.objects.create(user=self.owner, name="Bakso")
        self.order = Order.objects.create(vendor=self.vendor, buyer=self.buyer, items="2x bakso")

    def test_terminal_states_are_final(self):
        for terminal in (Order.STATUS_REJECTED, Order.STATUS_CANCELLED, Order.STATUS_COMPLETED):
            self.assertFalse(can_transition(from_status=terminal, to_status=Order.STATUS_ACCEPTED))

    def test_pending_cannot_complete(self):
        self.assertFalse(
            can_transition(from_status=Order.STATUS_PENDING, to_status=Order.STATUS_COMPLETED)
        )

    def test_buyer_cannot_accept(self):
        with self.assertRaises(OrderPermissionError):
            validate_transition(order=self.order, target_status=Order.STATUS_ACCEPTED, user=self.buyer)

    def test_vendor_cannot_cancel(self):
        with self.assertRaises(OrderPermissionError):
            validate_transition(
                order=self.order, target_status=Order.STATUS_CANCELLED, user=self.owner
            )

    def test_permission_checked_before_transition(self):
        self.order.status = Order.STATUS_COMPLETED

        with self.assertRaises(OrderPermissionError):
            validate_transition(order=self.order, target_status=Order.STATUS_ACCEPTED, user=self.buyer)
        with self.assertRaises(InvalidOrderTransitionError):
            validate_transition(order=self.order, target_status=Order.STATUS_ACCEPTED, user=self.owner)


class OrderApiTests(TestCase):
    """
    /api/orders/

    GUARANTEES:
    - Orders are visible only to their buyer and the vendor's owner
    - Vendor side accepts/rejects/completes, buyer side cancels
    - Terminal orders never move again
    """

    def setUp(self):
        self.client = APIClient()
        self.owner = User.objects.create_user(
            email="owner@example.com", password="Pass1234!", role=ROLE_VENDOR
        )
        self.buyer = User.objects.create_user(
            email="buyer@example.com", password="Pass1234!", full_name="Budi"
        )
        self.stranger = User.objects.create_user(email="s@example.com", password="Pass1234!")
        self.vendor = Vendor.objects.create(user=self.owner, name="Bakso")

    def _place(self, items="2x bakso urat"):
        self.client.force_authenticate(self.buyer)
        res = self.client.post(
            "/api/orders/",
            {"vendor_id": str(self.vendor.id), "items": items, "note": "no chili"},
            format="json",
        )
        self.assertEqual(res.status_code, status.HTTP_201_CREATED)
        return res.data["id"]

    def _set_status(self, user, order_id, value):
        self.client.force_authenticate(user)
        return self.client.post(
            f"/api/orders/{order_id}/status/", {"status": value}, format="json"
        )

    def test_place_order(self):
        order_id = self._place()

        order = Order.objects.get(pk=order_id)
        self.assertEqual(order.status, Order.STATUS_PENDING)
        self.assertEqual(order.buyer, self.buyer)
        self.assertEqual(order.buyer_name, "Budi")
        self.assertEqual(order.note, "no chili")

    def test_place_order_requires_auth(self):
        res = self.client.post(
            "/api/orders/", {"vendor_id": str(self.vendor.id), "items": "x"}, format="json"
        )

        self.assertEqual(res.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_blank_items_rejected(self):
        self.client.force_authenticate(self.buyer)

        res = self.client.post(
            "/api/orders/", {"vendor_id": str(self.vendor.id), "items": "   "}, format="json"
        )

        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)

    def test_unknown_vendor_404(self):
        self.client.force_authenticate(self.buyer)

        res = self.client.post(
            "/api/orders/",
            {"vendor_id": "00000000-0000-0000-0000-000000000000", "items": "x"},
            format="json",
        )

        self.assertEqual(res.status_code, status.HTTP_404_NOT_FOUND)

    def test_self_order_rejected(self):
        self.client.force_authenticate(self.owner)

        res = self.client.post(
            "/api/orders/", {"vendor_id": str(self.vendor.id), "items": "x"}, format="json"
        )

        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(Order.objects.exists())

    def test_accept_then_complete(self):
        order_id = self._place()

        res = self._set_status(self.owner, order_id, Order.STATUS_ACCEPTED)
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data["status"], Order.STATUS_ACCEPTED)

        res = self._set_status(self.owner, order_id, Order.STATUS_COMPLETED)
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(Order.objects.get(pk=order_id).status, Order.STATUS_COMPLETED)

    def test_buyer_cancels(self):
        order_id = self._place()

        res = self._set_status(self.buyer, order_id, Order.STATUS_CANCELLED)

        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data["status"], Order.STATUS_CANCELLED)

    def test_buyer_cannot_accept(self):
        order_id = self._place()

        res = self._set_status(self.buyer, order_id, Order.STATUS_ACCEPTED)

        self.assertEqual(res.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(Order.objects.get(pk=order_id).status, Order.STATUS_PENDING)

    def test_terminal_order_is_final(self):
        order_id = self._place()
        self._set_status(self.owner, order_id, Order.STATUS_REJECTED)

        res = self._set_status(self.owner, order_id, Order.STATUS_ACCEPTED)

        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(Order.objects.get(pk=order_id).status, Order.STATUS_REJECTED)

    def test_unknown_status_value(self):
        order_id = self._place()

        res = self._set_status(self.owner, order_id, "shipped")

        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)

    def test_stranger_gets_404(self):
        order_id = self._place()

        res = self._set_status(self.stranger, order_id, Order.STATUS_CANCELLED)
        self.assertEqual(res.status_code, status.HTTP_404_NOT_FOUND)

        res = self.client.get(f"/api/orders/{order_id}/")
        self.assertEqual(res.status_code, status.HTTP_404_NOT_FOUND)

    def test_list_visibility_and_status_filter(self):
        first = self._place("1x bakso")
        self._place("2x bakso")
        self._set_status(self.owner, first, Order.STATUS_ACCEPTED)

        self.client.force_authenticate(self.owner)
        res = self.client.get("/api/orders/")
        self.assertEqual(res.data["count"], 2)

        res = self.client.get("/api/orders/", {"status": Order.STATUS_ACCEPTED})
        self.assertEqual([o["id"] for o in res.data["results"]], [first])

        self.client.force_authenticate(self.stranger)
        res = self.client.get("/api/orders/")
        self.assertEqual(res.data["count"], 0)
