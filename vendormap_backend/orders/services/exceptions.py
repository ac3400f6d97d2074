# orders/services/exceptions.py


class OrderError(Exception):
    """Base exception for all order domain errors."""


class InvalidOrderTransitionError(OrderError):
    """Raised when the requested status is not reachable from the current one."""


class OrderPermissionError(OrderError):
    """Raised when the actor's side (vendor or buyer) may not set that status."""


class SelfOrderError(OrderError):
    """Raised when a vendor tries to order from their own vendor record."""
