from .presence import PresenceThrottle, VendorPresenceView
from .vendor import VendorViewSet

__all__ = [
    "PresenceThrottle",
    "VendorPresenceView",
    "VendorViewSet",
]
