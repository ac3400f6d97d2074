"""
Client side of the vendor presence protocol.

    session = ClientSession(base_url=..., access_token=..., principal_id=...)
    transport = HttpTransport(session)
    directory = VendorDirectory(session, transport)
    directory.reload()
    client = PresenceToggleClient(session=session, transport=transport, directory=directory)
    client.toggle(vendor_id, current_known_value)
"""

from presence_client.directory import VendorDirectory, VendorView
from presence_client.exceptions import NotOwnerError, PresenceClientError, TransportError
from presence_client.feed import PollingChangeFeed
from presence_client.session import ClientSession
from presence_client.toggle import PresenceToggleClient, ToggleOutcome
from presence_client.transport import HttpTransport

__all__ = [
    "ClientSession",
    "HttpTransport",
    "NotOwnerError",
    "PollingChangeFeed",
    "PresenceClientError",
    "PresenceToggleClient",
    "ToggleOutcome",
    "TransportError",
    "VendorDirectory",
    "VendorView",
]
