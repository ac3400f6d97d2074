# users/management/commands/ensure_superuser.py

"""
Bootstrap the admin account from AUTO_ADMIN_EMAIL / AUTO_ADMIN_PASSWORD.

Safe to run on every deploy: an existing account is promoted, and its
password is only replaced with --reset-password.
"""

from __future__ import annotations

import logging

import environ
from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand
from django.db import transaction

from permissions.roles import ROLE_ADMIN

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    help = "Create or promote the admin account from AUTO_ADMIN_* env vars."

    def add_arguments(self, parser):
        parser.add_argument(
            "--reset-password",
            action="store_true",
            help="Overwrite the password of an existing account.",
        )

    def handle(self, *args, **options):
        env = environ.Env()
        email = env.str("AUTO_ADMIN_EMAIL", default="").strip()
        password = env.str("AUTO_ADMIN_PASSWORD", default="").strip()

        if not email or not password:
            self.stdout.write(self.style.WARNING("AUTO_ADMIN_EMAIL/AUTO_ADMIN_PASSWORD not set; skipping."))
            return

        User = get_user_model()

        with transaction.atomic():
            user = User.objects.select_for_update().filter(email__iexact=email).first()
            if user is None:
                User.objects.create_superuser(email=email, password=password)
                logger.info("Admin account created", extra={"email": email})
                self.stdout.write(self.style.SUCCESS(f"Admin created: {email}"))
                return

            user.role = ROLE_ADMIN
            user.is_active = True
            user.is_staff = True
            user.is_superuser = True
            update_fields = ["role", "is_active", "is_staff", "is_superuser", "updated_at"]
            if options["reset_password"]:
                user.set_password(password)
                update_fields.append("password")
            user.save(update_fields=update_fields)

        logger.info("Admin account promoted", extra={"email": email})
        self.stdout.write(self.style.SUCCESS(f"Admin ensured: {email}"))
