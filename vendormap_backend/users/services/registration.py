# users/services/registration.py
"""
REGISTRATION SERVICE

A vendor account is two rows: the User (auth identity) and the Vendor
record that carries presence + location. Both are created in one
transaction so a vendor can never exist without its presence record.
"""

from __future__ import annotations

import logging

from django.contrib.auth import get_user_model
from django.db import transaction

from vendors.models import Vendor

logger = logging.getLogger(__name__)

User = get_user_model()


@transaction.atomic
def register_account(*, email: str, password: str, full_name: str = "", role: str):
    user = User.objects.create_user(
        email=email,
        password=password,
        full_name=full_name,
        role=role,
    )

    if user.is_vendor:
        Vendor.objects.create(user=user, name=full_name.strip() or "Vendor")

    logger.info("Account registered", extra={"user_id": str(user.id), "role": role})
    return user
