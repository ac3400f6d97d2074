# presence_client/tests/test_end_to_end.py

from __future__ import annotations

from django.contrib.auth import get_user_model
from django.test import TestCase
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken

from permissions.roles import ROLE_VENDOR
from presence_client import ClientSession, NotOwnerError, PresenceToggleClient, VendorDirectory
from presence_client.state import Confirmed, Reverted
from presence_client.tests.fakes import APIClientTransport
from vendors.models import Vendor

User = get_user_model()


class PresenceClientEndToEndTests(TestCase):
    """The client half driving the real presence endpoint."""

    def setUp(self):
        self.owner = User.objects.create_user(
            email="owner@example.com", password="Pass1234!", role=ROLE_VENDOR
        )
        self.other = User.objects.create_user(
            email="other@example.com", password="Pass1234!", role=ROLE_VENDOR
        )
        self.vendor = Vendor.objects.create(
            user=self.owner, name="Bakso", online=False, latitude=-6.2, longitude=106.8
        )
        self.notes = []

    def connect(self, user, principal_id=None):
        token = str(RefreshToken.for_user(user).access_token)
        session = ClientSession(
            base_url="http://testserver",
            access_token=token,
            principal_id=str(principal_id or user.pk),
        )
        transport = APIClientTransport(APIClient(), token)
        directory = VendorDirectory(session, transport)
        directory.reload()
        client = PresenceToggleClient(
            session=session,
            transport=transport,
            directory=directory,
            notify=lambda level, msg: self.notes.append(msg),
        )
        return client, directory, transport

    def test_owner_toggles_twice(self):
        client, directory, _ = self.connect(self.owner)
        vendor_id = str(self.vendor.id)

        first = client.toggle(vendor_id, directory.get(vendor_id).online)
        second = client.toggle(vendor_id, directory.get(vendor_id).online)

        self.assertEqual((first.online, second.online), (True, False))
        self.assertEqual(client.state_of(vendor_id), Confirmed(False))
        self.vendor.refresh_from_db()
        self.assertFalse(self.vendor.online)
        self.assertEqual(self.notes, ["Status updated: online", "Status updated: offline"])

    def test_other_vendor_is_refused_locally(self):
        client, directory, transport = self.connect(self.other)
        calls_before = len(transport.calls)

        with self.assertRaises(NotOwnerError):
            client.toggle(str(self.vendor.id), False)

        self.assertEqual(len(transport.calls), calls_before)

    def test_server_refusal_reverts(self):
        # Session claims ownership but the token belongs to someone else.
        client, directory, _ = self.connect(self.other, principal_id=self.owner.pk)
        vendor_id = str(self.vendor.id)

        outcome = client.toggle(vendor_id, False)

        self.assertFalse(outcome.ok)
        self.assertIsInstance(client.state_of(vendor_id), Reverted)
        self.assertIs(directory.get(vendor_id).online, False)
        self.assertEqual(
            self.notes, ["Failed to update status: Not allowed: you are not owner of this vendor"]
        )
        self.vendor.refresh_from_db()
        self.assertFalse(self.vendor.online)
