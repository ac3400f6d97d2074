# presence_client/tests/test_directory.py

from __future__ import annotations

from django.test import SimpleTestCase

from presence_client.directory import VendorDirectory
from presence_client.exceptions import TransportError
from presence_client.session import ClientSession
from presence_client.tests.fakes import ScriptedTransport, vendor_record
from realtime.feed import EVENT_UPDATE, ChangeFeed

CENTER = (-6.2, 106.8166)


class VendorDirectoryTests(SimpleTestCase):
    def setUp(self):
        self.session = ClientSession(base_url="http://api.test")

    def make_directory(self, *script):
        transport = ScriptedTransport(*script)
        directory = VendorDirectory(self.session, transport)
        directory.load(
            [
                vendor_record(id="near", name="Bakso", online=True, location={"lat": -6.201, "lng": 106.8166}),
                vendor_record(id="far", name="Sate", description="Sate ayam", location={"lat": -6.3, "lng": 106.8166}),
                vendor_record(id="nowhere", name="Es Doger", location=None),
            ]
        )
        return directory, transport

    def test_text_query_matches_name_or_description(self):
        directory, _ = self.make_directory()

        self.assertEqual([v.id for v in directory.filter(query="AYAM")], ["far"])
        self.assertEqual(len(directory.filter(query="  ")), 3)

    def test_radius_excludes_unlocated_and_distant(self):
        directory, _ = self.make_directory()

        self.assertEqual([v.id for v in directory.filter(center=CENTER)], ["near"])
        self.assertEqual(
            {v.id for v in directory.filter(center=CENTER, radius_km=20)}, {"near", "far"}
        )

    def test_online_only(self):
        directory, _ = self.make_directory()

        self.assertEqual([v.id for v in directory.filter(online_only=True)], ["near"])

    def test_get_returns_a_copy(self):
        directory, _ = self.make_directory()

        directory.get("near").online = False

        self.assertIs(directory.get("near").online, True)

    def test_reload_accepts_list_or_paginated_envelope(self):
        directory, transport = self.make_directory(
            [vendor_record(id="a")], {"count": 1, "results": [vendor_record(id="b")]}
        )

        self.assertEqual([v.id for v in directory.reload()], ["a"])
        self.assertEqual([v.id for v in directory.reload()], ["b"])
        self.assertEqual(transport.calls[0][:2], ("GET", "/api/vendors/"))

    def test_change_notification_triggers_reload(self):
        feed = ChangeFeed()
        directory, transport = self.make_directory([vendor_record(id="near", online=False)])
        directory.attach(feed)

        feed.publish("vendors", EVENT_UPDATE, "near")

        self.assertEqual(len(transport.calls), 1)
        self.assertIs(directory.get("near").online, False)

        directory.detach()
        feed.publish("vendors", EVENT_UPDATE, "near")
        self.assertEqual(len(transport.calls), 1)

    def test_failed_reload_keeps_current_views(self):
        feed = ChangeFeed()
        directory, _ = self.make_directory(TransportError("Network error: down"))
        directory.attach(feed)

        with self.assertLogs("presence_client.directory", level="WARNING"):
            feed.publish("vendors", EVENT_UPDATE, "near")

        self.assertEqual(len(directory.all()), 3)

    def test_reload_drops_local_marks(self):
        directory, _ = self.make_directory([vendor_record(id="near", online=True)])
        directory.set_presence("near", online=False, updating=True)

        directory.reload()

        view = directory.get("near")
        self.assertIs(view.online, True)
        self.assertFalse(view.updating)
