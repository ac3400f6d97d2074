# realtime/tests/test_feed.py

from __future__ import annotations

from django.test import SimpleTestCase

from realtime.feed import (
    EVENT_INSERT,
    EVENT_UPDATE,
    ChangeFeed,
    chat_topic,
    is_known_topic,
)


class ChangeFeedTests(SimpleTestCase):
    def setUp(self):
        self.feed = ChangeFeed(backlog=3)

    def test_subscribers_receive_only_their_topic(self):
        seen = []
        self.feed.subscribe("vendors", seen.append)

        self.feed.publish("vendors", EVENT_UPDATE, "v1")
        self.feed.publish("products", EVENT_INSERT, "p1")

        self.assertEqual([(e.topic, e.id) for e in seen], [("vendors", "v1")])

    def test_unsubscribe_is_idempotent(self):
        seen = []
        sub = self.feed.subscribe("vendors", seen.append)

        sub.unsubscribe()
        sub.unsubscribe()
        self.feed.publish("vendors", EVENT_UPDATE, "v1")

        self.assertEqual(seen, [])

    def test_failing_subscriber_does_not_block_others(self):
        seen = []

        def broken(event):
            raise RuntimeError("boom")

        self.feed.subscribe("vendors", broken)
        self.feed.subscribe("vendors", seen.append)

        with self.assertLogs("realtime.feed", level="ERROR"):
            self.feed.publish("vendors", EVENT_UPDATE, "v1")

        self.assertEqual(len(seen), 1)

    def test_changes_since_cursor(self):
        self.feed.publish("vendors", EVENT_UPDATE, "v1")
        self.feed.publish("vendors", EVENT_UPDATE, "v2")

        events, cursor, reset = self.feed.changes_since("vendors", 1)

        self.assertEqual([e.id for e in events], ["v2"])
        self.assertEqual(cursor, 2)
        self.assertFalse(reset)

    def test_backlog_overflow_signals_reset(self):
        for i in range(6):
            self.feed.publish("vendors", EVENT_UPDATE, f"v{i}")

        events, cursor, reset = self.feed.changes_since("vendors", 1)

        self.assertTrue(reset)
        self.assertEqual(cursor, 6)
        self.assertEqual([e.seq for e in events], [4, 5, 6])

    def test_cursor_from_the_future_signals_reset(self):
        self.feed.publish("vendors", EVENT_UPDATE, "v1")

        _, cursor, reset = self.feed.changes_since("vendors", 99)

        self.assertTrue(reset)
        self.assertEqual(cursor, 1)

    def test_private_events_respect_audience(self):
        self.feed.publish("orders", EVENT_INSERT, "o1", audience=["u1", None])

        self.assertEqual(len(self.feed.changes_since("orders", 0, user_id="u1")[0]), 1)
        self.assertEqual(self.feed.changes_since("orders", 0, user_id="u2")[0], [])
        self.assertEqual(self.feed.changes_since("orders", 0)[0], [])

    def test_known_topics(self):
        self.assertTrue(is_known_topic("vendors"))
        self.assertTrue(is_known_topic(chat_topic("abc")))
        self.assertFalse(is_known_topic("messages:"))
        self.assertFalse(is_known_topic("payments"))
