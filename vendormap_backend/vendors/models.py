# vendors/models.py

"""
PATH: vendors/models.py

VENDOR PRESENCE RECORD

One row per traveling vendor:
- user: the owning principal (only this user may flip `online`)
- online: presence flag broadcast on the customer map
- latitude/longitude: last shared position (nullable until shared)

Lifecycle:
- created at vendor registration (users.services.registration)
- presence mutated only through the presence endpoint or Django admin
- never deleted by the app; if the user is deleted the record is orphaned
  (user=NULL) and nobody can toggle it anymore
"""

from __future__ import annotations

import uuid

from django.conf import settings
from django.db import models


class Vendor(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="vendor_profile",
    )

    name = models.CharField(max_length=255)
    description = models.TextField(blank=True)
    photo_url = models.URLField(max_length=500, blank=True)

    latitude = models.FloatField(null=True, blank=True)
    longitude = models.FloatField(null=True, blank=True)

    online = models.BooleanField(default=False, db_index=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["name"]
        indexes = [
            models.Index(fields=["latitude", "longitude"], name="vendor_lat_lng_idx"),
        ]

    @property
    def has_location(self) -> bool:
        return self.latitude is not None and self.longitude is not None

    def __str__(self):
        state = "online" if self.online else "offline"
        return f"{self.name} ({state})"
