"""
In-memory vendor list behind the customer map.

- reload(): replace every view from GET /api/vendors/
- filter(): text query (name + description) and radius around a point
- attach(feed): re-fetch on every change notification on "vendors"

Views are plain mutable records; the toggle client updates `online` and
`updating` through set_presence(). A reload drops local marks.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, replace
from typing import Any, Optional

from presence_client.exceptions import TransportError
from presence_client.session import ClientSession
from presence_client.transport import Transport
from vendors.services.geo import parse_location, within_radius

logger = logging.getLogger(__name__)

DEFAULT_RADIUS_KM = 2.5
VENDORS_TOPIC = "vendors"


@dataclass
class VendorView:
    id: str
    name: str = ""
    description: str = ""
    user_id: Optional[str] = None
    online: bool = False
    location: Optional[tuple[float, float]] = None
    photo_url: str = ""
    updating: bool = False

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "VendorView":
        location = parse_location(record.get("location")) or parse_location(record)
        user_id = record.get("user_id")
        return cls(
            id=str(record["id"]),
            name=record.get("name") or "",
            description=record.get("description") or "",
            user_id=str(user_id) if user_id else None,
            online=bool(record.get("online")),
            location=location,
            photo_url=record.get("photo_url") or "",
        )

    def matches(self, query: str) -> bool:
        query = (query or "").strip().lower()
        if not query:
            return True
        return query in self.name.lower() or query in self.description.lower()


class VendorDirectory:
    def __init__(self, session: ClientSession, transport: Transport) -> None:
        self.session = session
        self.transport = transport
        self._lock = threading.RLock()
        self._views: dict[str, VendorView] = {}
        self._subscription = None

    # ------------------------------------------------------------------
    def load(self, records: Iterable[Mapping[str, Any]]) -> None:
        views = {}
        for record in records:
            view = VendorView.from_record(record)
            views[view.id] = view
        with self._lock:
            self._views = views

    def reload(self) -> list[VendorView]:
        records = self.transport.request_json("GET", "/api/vendors/")
        if isinstance(records, Mapping):
            # Tolerate a paginated envelope.
            records = records.get("results") or []
        self.load(records or [])
        return self.all()

    def get(self, vendor_id) -> Optional[VendorView]:
        with self._lock:
            view = self._views.get(str(vendor_id))
            return replace(view) if view is not None else None

    def all(self) -> list[VendorView]:
        with self._lock:
            return [replace(v) for v in self._views.values()]

    def set_presence(self, vendor_id, *, online: bool, updating: bool) -> None:
        with self._lock:
            view = self._views.get(str(vendor_id))
            if view is None:
                return
            view.online = bool(online)
            view.updating = bool(updating)

    # ------------------------------------------------------------------
    def filter(
        self,
        *,
        query: str = "",
        center: Optional[tuple[float, float]] = None,
        radius_km: Optional[float] = None,
        online_only: bool = False,
    ) -> list[VendorView]:
        """
        Vendors matching `query`; with `center`, only located vendors within
        `radius_km` (default 2.5 km) of it.
        """
        radius = DEFAULT_RADIUS_KM if radius_km is None else radius_km
        result = []
        for view in self.all():
            if online_only and not view.online:
                continue
            if not view.matches(query):
                continue
            if center is not None:
                if view.location is None or not within_radius(center, view.location, radius):
                    continue
            result.append(view)
        return result

    # ------------------------------------------------------------------
    def attach(self, feed) -> None:
        """Reload on every change notification from `feed` (any subscribe() provider)."""
        self.detach()
        self._subscription = feed.subscribe(VENDORS_TOPIC, self._on_change)

    def detach(self) -> None:
        if self._subscription is not None:
            self._subscription.unsubscribe()
            self._subscription = None

    def _on_change(self, event) -> None:
        try:
            self.reload()
        except TransportError:
            logger.warning("Vendor reload after change notification failed", exc_info=True)
