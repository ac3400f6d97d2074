# backend/settings/test.py
"""
PATH: backend/settings/test.py

TEST SETTINGS

Used by both runners:
- python manage.py test          (manage.py switches to this module)
- pytest                         (pyproject.toml DJANGO_SETTINGS_MODULE)

Goals:
- In-memory SQLite, no .env dependency
- Fast password hashing
- Throttle rates high enough that tests never trip them
- Uploads written to a throwaway directory
"""

from __future__ import annotations

import tempfile

from .base import *  # noqa: F403
from .base import REST_FRAMEWORK  # explicit for Ruff (F405)

DEBUG = False
TESTING = True

SECRET_KEY = "test-only-secret-key-not-for-production-use"

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": ":memory:",
    }
}

PASSWORD_HASHERS = ["django.contrib.auth.hashers.MD5PasswordHasher"]

REST_FRAMEWORK = {
    **REST_FRAMEWORK,
    "DEFAULT_THROTTLE_RATES": {
        scope: "10000/min" for scope in REST_FRAMEWORK["DEFAULT_THROTTLE_RATES"]
    },
}

MEDIA_ROOT = tempfile.mkdtemp(prefix="vendormap-test-media-")
MAX_UPLOAD_BYTES = 1024

REALTIME_BACKLOG = 50
