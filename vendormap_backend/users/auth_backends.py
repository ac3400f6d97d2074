"""
PATH: users/auth_backends.py

AUTH BACKEND: case-insensitive email login

Rules:
- Login identifier is the email address, matched case-insensitively
  (customers type "Budi@Mail.com" on phones; registration stored "budi@mail.com").
- Inactive users never authenticate.

This is used by Django auth() and the JWT login view (via authenticate()).
"""

from __future__ import annotations

from django.contrib.auth import get_user_model
from django.contrib.auth.backends import BaseBackend

User = get_user_model()


class EmailBackend(BaseBackend):
    def authenticate(self, request, username=None, password=None, **kwargs):
        """
        Django convention passes "username" as the identifier;
        our serializers pass email=... explicitly.
        """
        identifier = (kwargs.get("email") or username or "").strip()
        if not identifier or password is None:
            return None

        try:
            user = User.objects.get(email__iexact=identifier)
        except User.DoesNotExist:
            return None

        if not user.is_active:
            return None

        if user.check_password(password):
            return user

        return None

    def get_user(self, user_id):
        try:
            return User.objects.get(pk=user_id)
        except User.DoesNotExist:
            return None
