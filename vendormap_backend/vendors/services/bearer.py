# vendors/services/bearer.py

"""
BEARER AUTHENTICATION (presence endpoint)

The presence endpoint answers auth failures with {"error": ...} bodies
(not DRF's {"detail": ...}), so it resolves the principal itself:

- extract_access_token: "Authorization: Bearer <token>" -> token | None
- verify_token: token -> active User (SimpleJWT validation)
"""

from __future__ import annotations

import logging

from rest_framework.exceptions import AuthenticationFailed
from rest_framework_simplejwt.authentication import JWTAuthentication
from rest_framework_simplejwt.exceptions import InvalidToken, TokenError

from vendors.services.exceptions import Unauthenticated

logger = logging.getLogger(__name__)


def extract_access_token(request) -> str | None:
    header = request.headers.get("Authorization") or ""
    parts = header.split()
    if len(parts) == 2 and parts[0].lower() == "bearer":
        return parts[1]
    return None


def verify_token(token: str):
    authenticator = JWTAuthentication()
    try:
        validated = authenticator.get_validated_token(token)
        return authenticator.get_user(validated)
    except (InvalidToken, TokenError, AuthenticationFailed) as exc:
        logger.info("Bearer token rejected", extra={"reason": str(exc)})
        raise Unauthenticated("Invalid token") from exc


def authenticate_bearer(request):
    token = extract_access_token(request)
    if not token:
        raise Unauthenticated("Missing authorization token")
    return verify_token(token)
