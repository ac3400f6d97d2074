"""
Optimistic presence toggle (client half).

toggle(vendor_id, current_known_value):
1. local ownership check (NotOwnerError, no network, no mutation)
2. show `not current` immediately, mark the view as updating
3. POST /api/vendor/<id>/online {"online": desired}
4. success -> show the server-confirmed value
   failure -> show `current` again, notify the user

Overlapping toggles on one vendor: every request gets a monotonic id and
only the response to the latest one is applied.
"""

from __future__ import annotations

import itertools
import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass
from typing import Optional

from presence_client.directory import VendorDirectory
from presence_client.exceptions import NotOwnerError, PresenceClientError, TransportError
from presence_client.session import ClientSession
from presence_client.state import (
    Idle,
    PresenceState,
    ServerFailed,
    ServerSucceeded,
    ToggleRequested,
    displayed_value,
    is_updating,
    reduce,
)
from presence_client.transport import Transport

logger = logging.getLogger(__name__)

LEVEL_SUCCESS = "success"
LEVEL_ERROR = "error"

Notifier = Callable[[str, str], None]


@dataclass(frozen=True)
class ToggleOutcome:
    vendor_id: str
    ok: bool
    online: bool
    stale: bool = False
    error: Optional[PresenceClientError] = None


def _noop_notify(level: str, message: str) -> None:
    return None


def presence_path(vendor_id) -> str:
    return f"/api/vendor/{vendor_id}/online"


class PresenceToggleClient:
    def __init__(
        self,
        *,
        session: ClientSession,
        transport: Transport,
        directory: VendorDirectory,
        notify: Optional[Notifier] = None,
    ) -> None:
        self.session = session
        self.transport = transport
        self.directory = directory
        self.notify = notify or _noop_notify
        self._lock = threading.Lock()
        self._ids = itertools.count(1)
        self._states: dict[str, PresenceState] = {}

    def state_of(self, vendor_id) -> Optional[PresenceState]:
        with self._lock:
            return self._states.get(str(vendor_id))

    def toggle(self, vendor_id, current_known_value: bool) -> ToggleOutcome:
        vendor_id = str(vendor_id)
        view = self.directory.get(vendor_id)
        if view is None or not self.session.owns(view.user_id):
            raise NotOwnerError("Not allowed: you are not owner of this vendor")

        current = bool(current_known_value)
        with self._lock:
            request_id = next(self._ids)
            state = reduce(
                self._states.get(vendor_id, Idle(current)),
                ToggleRequested(current=current, request_id=request_id),
            )
            self._states[vendor_id] = state
            self.directory.set_presence(vendor_id, online=displayed_value(state), updating=True)

        desired = state.tentative
        try:
            payload = self.transport.request_json(
                "POST", presence_path(vendor_id), body={"online": desired}
            )
            confirmed = payload.get("online") if isinstance(payload, dict) else None
            if not isinstance(confirmed, bool):
                raise TransportError("Malformed response from server")
            event = ServerSucceeded(request_id=request_id, online=confirmed)
        except PresenceClientError as exc:
            logger.info("Presence toggle failed: vendor=%s error=%s", vendor_id, exc)
            event = ServerFailed(request_id=request_id, error=exc)
        except Exception as exc:
            logger.exception("Unexpected presence toggle failure: vendor=%s", vendor_id)
            error = TransportError(f"Unexpected error: {exc}")
            event = ServerFailed(request_id=request_id, error=error)

        with self._lock:
            before = self._states.get(vendor_id)
            after = reduce(before, event)
            if after is before:
                # A newer toggle owns the view now.
                return ToggleOutcome(
                    vendor_id=vendor_id,
                    ok=isinstance(event, ServerSucceeded),
                    online=displayed_value(after),
                    stale=True,
                    error=getattr(event, "error", None),
                )
            self._states[vendor_id] = after
            self.directory.set_presence(
                vendor_id, online=displayed_value(after), updating=is_updating(after)
            )

        if isinstance(event, ServerSucceeded):
            self.notify(LEVEL_SUCCESS, f"Status updated: {'online' if after.value else 'offline'}")
            return ToggleOutcome(vendor_id=vendor_id, ok=True, online=after.value)

        self.notify(LEVEL_ERROR, _failure_message(event.error))
        return ToggleOutcome(vendor_id=vendor_id, ok=False, online=after.value, error=event.error)


def _failure_message(error: Optional[Exception]) -> str:
    if isinstance(error, TransportError):
        if error.forbidden:
            return f"Failed to update status: {error.message}"
        return f"Failed to update status: {error.message}. Please try again."
    return "Failed to update status. Please try again."
