# vendors/apps.py

"""
VENDORS APP CONFIG

Traveling vendor records:
- presence flag (online/offline) toggled by the owning vendor
- geolocation shown on the customer map
"""

from django.apps import AppConfig


class VendorsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "vendors"
    verbose_name = "Vendors"
