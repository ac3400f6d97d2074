# vendors/admin.py

"""
VENDORS ADMIN

Administrative edit is the only way besides the presence endpoint to
change `online` (e.g. forcing a vendor offline).
"""

from __future__ import annotations

from django.contrib import admin

from vendors.models import Vendor


@admin.register(Vendor)
class VendorAdmin(admin.ModelAdmin):
    list_display = ("name", "user", "online", "latitude", "longitude", "updated_at")
    list_filter = ("online",)
    search_fields = ("name", "description", "user__email")
    readonly_fields = ("id", "created_at", "updated_at")
    raw_id_fields = ("user",)
    actions = ["mark_offline"]

    @admin.action(description="Force selected vendors offline")
    def mark_offline(self, request, queryset):
        updated = 0
        # Per-row save so change signals reach the realtime feed.
        for vendor in queryset.filter(online=True):
            vendor.online = False
            vendor.save(update_fields=["online", "updated_at"])
            updated += 1
        self.message_user(request, f"{updated} vendor(s) set offline.")
