"""In-process publish/subscribe hub for row-level change notifications."""

from __future__ import annotations

import logging
import threading
from collections import deque
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Optional

logger = logging.getLogger(__name__)

EVENT_INSERT = "INSERT"
EVENT_UPDATE = "UPDATE"
EVENT_DELETE = "DELETE"

PUBLIC_TOPICS = frozenset({"vendors", "products"})
PRIVATE_TOPICS = frozenset({"orders", "chats", "messages"})
CHAT_TOPIC_PREFIX = "messages:"


def chat_topic(chat_id) -> str:
    return f"{CHAT_TOPIC_PREFIX}{chat_id}"


def is_known_topic(topic: str) -> bool:
    if topic in PUBLIC_TOPICS or topic in PRIVATE_TOPICS:
        return True
    return topic.startswith(CHAT_TOPIC_PREFIX) and len(topic) > len(CHAT_TOPIC_PREFIX)


@dataclass(frozen=True)
class ChangeEvent:
    seq: int
    topic: str
    event: str
    id: str
    # None = visible to everyone; otherwise the user ids allowed to see it.
    audience: Optional[frozenset[str]] = None

    def visible_to(self, user_id: Optional[str]) -> bool:
        if self.audience is None:
            return True
        return user_id is not None and str(user_id) in self.audience

    def as_dict(self) -> dict:
        return {"seq": self.seq, "topic": self.topic, "event": self.event, "id": self.id}


Handler = Callable[[ChangeEvent], None]


class Subscription:
    """Handle returned by ChangeFeed.subscribe; unsubscribe() is idempotent."""

    def __init__(self, feed: "ChangeFeed", topic: str, handler: Handler) -> None:
        self._feed = feed
        self.topic = topic
        self.handler = handler
        self.active = True

    def unsubscribe(self) -> None:
        if self.active:
            self.active = False
            self._feed._remove(self)


class ChangeFeed:
    """
    Thread-safe topic hub.

    Subscribers are called synchronously, outside the lock, in subscription
    order. Published events are also kept in a bounded backlog so HTTP
    pollers can catch up with a sequence cursor.
    """

    def __init__(self, *, backlog: int = 500) -> None:
        self._lock = threading.RLock()
        self._seq = 0
        self._backlog: deque[ChangeEvent] = deque(maxlen=max(1, int(backlog)))
        self._subscribers: dict[str, list[Subscription]] = {}

    @property
    def cursor(self) -> int:
        with self._lock:
            return self._seq

    # ------------------------------------------------------------------
    def subscribe(self, topic: str, handler: Handler) -> Subscription:
        subscription = Subscription(self, topic, handler)
        with self._lock:
            self._subscribers.setdefault(topic, []).append(subscription)
        return subscription

    def _remove(self, subscription: Subscription) -> None:
        with self._lock:
            handlers = self._subscribers.get(subscription.topic, [])
            if subscription in handlers:
                handlers.remove(subscription)
            if not handlers:
                self._subscribers.pop(subscription.topic, None)

    # ------------------------------------------------------------------
    def publish(
        self,
        topic: str,
        event: str,
        obj_id,
        *,
        audience: Optional[Iterable] = None,
    ) -> ChangeEvent:
        with self._lock:
            self._seq += 1
            change = ChangeEvent(
                seq=self._seq,
                topic=topic,
                event=event,
                id=str(obj_id),
                audience=None if audience is None else frozenset(str(a) for a in audience if a),
            )
            self._backlog.append(change)
            targets = list(self._subscribers.get(topic, ()))

        logger.debug("feed publish: topic=%s event=%s id=%s seq=%s", topic, event, change.id, change.seq)

        for subscription in targets:
            if not subscription.active:
                continue
            try:
                subscription.handler(change)
            except Exception:
                # One broken listener must not stop delivery to the others.
                logger.exception("feed subscriber failed: topic=%s", topic)
        return change

    def changes_since(
        self, topic: str, since: int, *, user_id: Optional[str] = None
    ) -> tuple[list[ChangeEvent], int, bool]:
        """
        Events on `topic` with seq > since, visible to `user_id`.

        Returns (events, cursor, reset). `reset` is True when the backlog no
        longer reaches back to `since` (or the feed restarted); the caller
        should do a full reload.
        """
        with self._lock:
            cursor = self._seq
            oldest = self._backlog[0].seq if self._backlog else cursor + 1
            reset = since > cursor or 0 < since < oldest - 1
            events = [
                e
                for e in self._backlog
                if e.seq > since and e.topic == topic and e.visible_to(user_id)
            ]
        return events, cursor, reset


_default_feed: Optional[ChangeFeed] = None
_default_lock = threading.Lock()


def get_feed() -> ChangeFeed:
    """Process-wide feed used by model signals and the polling endpoint."""
    global _default_feed
    with _default_lock:
        if _default_feed is None:
            from django.conf import settings

            _default_feed = ChangeFeed(backlog=getattr(settings, "REALTIME_BACKLOG", 500))
        return _default_feed


def reset_feed() -> ChangeFeed:
    global _default_feed
    with _default_lock:
        _default_feed = None
    return get_feed()
