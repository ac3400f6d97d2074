"""Client-side errors for the presence toggle and vendor directory."""

from __future__ import annotations

from typing import Optional


class PresenceClientError(Exception):
    """Base exception for all presence client failures."""


class NotOwnerError(PresenceClientError):
    """Raised before any network call when the session does not own the vendor."""


class TransportError(PresenceClientError):
    """
    Network or HTTP failure.

    status is None for connection-level failures; message is the server's
    short error text when one was returned.
    """

    def __init__(self, message: str, *, status: Optional[int] = None) -> None:
        self.status = status
        self.message = message
        super().__init__(f"{status} {message}" if status is not None else message)

    @property
    def forbidden(self) -> bool:
        return self.status == 403
