# vendors/services/presence.py

"""
PRESENCE UPDATE SERVICE

The server half of the optimistic presence toggle.

Steps (order matters, it decides which error a caller sees):
1. caller is already authenticated by the view (bearer token)
2. load vendor under row lock        -> NotFound
3. ownership: vendor.user == caller  -> Forbidden
4. resolve value:
   - explicit "online" -> coerced to bool ("true"/"false"/1/0 accepted, null -> False)
   - absent            -> negation of the *stored* flag (never the client's guess)
   - malformed body    -> BadRequest
5. single-row write inside the same transaction -> Transient on failure
6. re-read and return the confirmed row

No sequencing/versioning: last write observed by the database wins.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import DatabaseError, transaction
from rest_framework import serializers

from permissions.roles import is_owner
from vendors.models import Vendor
from vendors.services.exceptions import (
    BadRequest,
    Forbidden,
    NotFound,
    Transient,
)

logger = logging.getLogger(__name__)

# Marker passed by the view when the body could not be parsed at all.
MALFORMED_BODY = object()


def requested_online_from(payload) -> bool | None:
    """
    Extract the requested flag from a request body.

    Returns None when the body carries no "online" key (server-side flip).
    """
    if payload is MALFORMED_BODY or not isinstance(payload, Mapping):
        raise BadRequest("Request body must be a JSON object")

    if "online" not in payload:
        return None

    value = payload["online"]
    if value is None:
        return False

    field = serializers.BooleanField()
    try:
        return field.to_internal_value(value)
    except (serializers.ValidationError, TypeError):
        # Not a recognised boolean spelling: plain truthiness.
        if isinstance(value, str) and value.strip() in field.NULL_VALUES:
            return False
        return bool(value)


def resolve_online(*, current: bool, requested: bool | None) -> bool:
    if requested is None:
        return not bool(current)
    return bool(requested)


def _load_vendor_for_update(vendor_id) -> Vendor:
    try:
        return Vendor.objects.select_for_update().get(pk=vendor_id)
    except (Vendor.DoesNotExist, DjangoValidationError, ValueError) as exc:
        raise NotFound("Vendor not found") from exc
    except DatabaseError as exc:
        logger.exception("Read vendor failed", extra={"vendor_id": str(vendor_id)})
        raise Transient("Failed to read vendor") from exc


def update_presence(*, vendor_id, caller, payload) -> Vendor:
    """
    Persist the presence flag for `vendor_id` on behalf of `caller`.

    Returns the re-read Vendor row; raises a PresenceError subclass otherwise.
    """
    with transaction.atomic():
        vendor = _load_vendor_for_update(vendor_id)

        if not is_owner(caller, vendor):
            logger.warning(
                "Presence update denied: not owner",
                extra={"vendor_id": str(vendor.id), "user_id": str(caller.pk)},
            )
            raise Forbidden()

        online = resolve_online(current=vendor.online, requested=requested_online_from(payload))

        vendor.online = online
        try:
            vendor.save(update_fields=["online", "updated_at"])
        except DatabaseError as exc:
            logger.exception("Update vendor online failed", extra={"vendor_id": str(vendor.id)})
            raise Transient("Failed to update vendor status") from exc

    try:
        vendor.refresh_from_db()
    except DatabaseError as exc:
        logger.exception("Re-read vendor failed", extra={"vendor_id": str(vendor.id)})
        raise Transient("Failed to read vendor") from exc

    logger.info(
        "Vendor presence updated",
        extra={"vendor_id": str(vendor.id), "online": vendor.online},
    )
    return vendor
