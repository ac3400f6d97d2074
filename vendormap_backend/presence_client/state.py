"""
Tagged presence state for one vendor marker, with a pure reducer.

    Idle(value) --ToggleRequested--> Pending(previous, tentative, request_id)
    Pending --ServerSucceeded(same id)--> Confirmed(server value)
    Pending --ServerFailed(same id)-----> Reverted(previous)

Events carrying a request id other than the pending one are stale and leave
the state untouched (last request sent wins).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union


@dataclass(frozen=True)
class Idle:
    value: bool


@dataclass(frozen=True)
class Pending:
    previous: bool
    tentative: bool
    request_id: int


@dataclass(frozen=True)
class Confirmed:
    value: bool


@dataclass(frozen=True)
class Reverted:
    value: bool
    error: Optional[Exception] = None


PresenceState = Union[Idle, Pending, Confirmed, Reverted]


@dataclass(frozen=True)
class ToggleRequested:
    current: bool
    request_id: int


@dataclass(frozen=True)
class ServerSucceeded:
    request_id: int
    online: bool


@dataclass(frozen=True)
class ServerFailed:
    request_id: int
    error: Optional[Exception] = None


PresenceEvent = Union[ToggleRequested, ServerSucceeded, ServerFailed]


def reduce(state: PresenceState, event: PresenceEvent) -> PresenceState:
    if isinstance(event, ToggleRequested):
        return Pending(
            previous=bool(event.current),
            tentative=not event.current,
            request_id=event.request_id,
        )

    if not isinstance(state, Pending) or state.request_id != event.request_id:
        return state

    if isinstance(event, ServerSucceeded):
        return Confirmed(bool(event.online))
    if isinstance(event, ServerFailed):
        return Reverted(state.previous, event.error)

    raise TypeError(f"Unknown presence event: {event!r}")


def displayed_value(state: PresenceState) -> bool:
    if isinstance(state, Pending):
        return state.tentative
    return state.value


def is_updating(state: PresenceState) -> bool:
    return isinstance(state, Pending)
