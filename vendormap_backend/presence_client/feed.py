"""
Polling change feed: the client-side provider of subscribe(topic, handler).

Each poll asks GET /api/realtime/<topic>/?since=<cursor> for every topic
with subscribers and hands each event dict to the handlers. The first poll
of a topic only records the cursor. When the server reports `reset`
(backlog overrun or restart) handlers get one {"event": "RESET"} dict so
they can do a full reload.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from typing import Any, Optional
from urllib.parse import quote

from presence_client.exceptions import TransportError
from presence_client.transport import Transport

logger = logging.getLogger(__name__)

Handler = Callable[[dict], None]

RESET_EVENT = "RESET"


class PollSubscription:
    def __init__(self, feed: "PollingChangeFeed", topic: str, handler: Handler) -> None:
        self._feed = feed
        self.topic = topic
        self.handler = handler
        self.active = True

    def unsubscribe(self) -> None:
        if self.active:
            self.active = False
            self._feed._remove(self)


class PollingChangeFeed:
    def __init__(self, transport: Transport, *, interval: float = 5.0) -> None:
        self.transport = transport
        self.interval = interval
        self._lock = threading.RLock()
        self._subscriptions: dict[str, list[PollSubscription]] = {}
        self._cursors: dict[str, Optional[int]] = {}
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    def subscribe(self, topic: str, handler: Handler) -> PollSubscription:
        subscription = PollSubscription(self, topic, handler)
        with self._lock:
            self._subscriptions.setdefault(topic, []).append(subscription)
            self._cursors.setdefault(topic, None)
        return subscription

    def _remove(self, subscription: PollSubscription) -> None:
        with self._lock:
            subs = self._subscriptions.get(subscription.topic, [])
            if subscription in subs:
                subs.remove(subscription)
            if not subs:
                self._subscriptions.pop(subscription.topic, None)
                self._cursors.pop(subscription.topic, None)

    def cursor(self, topic: str) -> Optional[int]:
        with self._lock:
            return self._cursors.get(topic)

    # ------------------------------------------------------------------
    def poll_once(self) -> int:
        """Poll every subscribed topic once; returns the number of events delivered."""
        with self._lock:
            topics = list(self._subscriptions)

        delivered = 0
        for topic in topics:
            delivered += self._poll_topic(topic)
        return delivered

    def _poll_topic(self, topic: str) -> int:
        with self._lock:
            since = self._cursors.get(topic)

        path = f"/api/realtime/{quote(topic, safe=':')}/?since={since or 0}"
        payload: Any = self.transport.request_json("GET", path)
        if not isinstance(payload, dict):
            raise TransportError("Malformed realtime response")

        with self._lock:
            if topic not in self._subscriptions:
                return 0
            self._cursors[topic] = int(payload.get("cursor") or 0)
            handlers = [s for s in self._subscriptions.get(topic, []) if s.active]

        if since is None:
            return 0

        if payload.get("reset"):
            events = [{"topic": topic, "event": RESET_EVENT, "id": None, "seq": payload.get("cursor")}]
        else:
            events = list(payload.get("events") or [])

        for event in events:
            for subscription in handlers:
                subscription.handler(event)
        return len(events)

    # ------------------------------------------------------------------
    def start(self) -> None:
        if self._thread is not None and self._thread.is_alive():
            return
        self._stop.clear()
        self._thread = threading.Thread(target=self._run, name="presence-feed-poller", daemon=True)
        self._thread.start()

    def stop(self, timeout: Optional[float] = None) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None

    def _run(self) -> None:
        while not self._stop.is_set():
            try:
                self.poll_once()
            except TransportError:
                logger.warning("Realtime poll failed", exc_info=True)
            except Exception:
                logger.exception("Realtime poll crashed; retrying")
            self._stop.wait(self.interval)
