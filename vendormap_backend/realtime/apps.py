# realtime/apps.py

"""
REALTIME APP CONFIG

In-process change feed:
- model signals publish row-level change notifications after commit
- list views (map, chats, orders) poll /api/realtime/<topic>/ and re-fetch
"""

from django.apps import AppConfig


class RealtimeConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "realtime"
    verbose_name = "Realtime"

    def ready(self):
        from realtime import signals  # noqa: F401
