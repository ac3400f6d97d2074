# vendors/services/exceptions.py

"""
PRESENCE SERVICE ERRORS

Every failure of the presence endpoint maps to exactly one of these.
Each carries the HTTP status and the short, client-safe message the
endpoint returns as {"error": message}. Storage internals stay in logs.
"""


class PresenceError(Exception):
    """Base exception for all presence update failures."""

    status_code = 500
    default_message = "Presence update failed"

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)


class BadRequest(PresenceError):
    """Raised when the request body is not a JSON object or `online` is not boolean-like."""

    status_code = 400
    default_message = "Request body must be a JSON object"


class Unauthenticated(PresenceError):
    """Raised when the bearer credential is missing or invalid."""

    status_code = 401
    default_message = "Invalid token"


class Forbidden(PresenceError):
    """Raised when the caller is authenticated but does not own the vendor."""

    status_code = 403
    default_message = "Not allowed: you are not owner of this vendor"


class NotFound(PresenceError):
    """Raised when the vendor record does not exist."""

    status_code = 404
    default_message = "Vendor not found"


class Transient(PresenceError):
    """Raised on storage failures; safe for the user to retry manually."""

    status_code = 500
    default_message = "Failed to update vendor status"


class Unexpected(PresenceError):
    """Catch-all for anything else; logged with traceback."""

    status_code = 500
    default_message = "Unexpected error while updating vendor status"
