# users/admin.py

"""
USERS ADMIN

- switch an account between customer and vendor
- see (and edit) the vendor record an account owns, presence included
- staff / superuser flags
"""

from __future__ import annotations

from django.contrib import admin
from django.contrib.auth import get_user_model
from django.contrib.auth.admin import UserAdmin as DjangoUserAdmin

from vendors.models import Vendor

User = get_user_model()


class VendorProfileInline(admin.StackedInline):
    model = Vendor
    fk_name = "user"
    extra = 0
    max_num = 1
    fields = ("name", "description", "photo_url", "online", "latitude", "longitude")


@admin.register(User)
class UserAdmin(DjangoUserAdmin):
    ordering = ("email",)
    list_display = ("email", "display_name", "role", "owns_vendor", "is_active")
    list_filter = ("role", "is_active", "is_staff")
    search_fields = ("email", "full_name", "vendor_profile__name")
    readonly_fields = ("created_at", "updated_at", "last_login")
    inlines = [VendorProfileInline]

    fieldsets = (
        (None, {"fields": ("email", "password")}),
        ("Profile", {"fields": ("full_name", "avatar_url", "role")}),
        ("Access", {"fields": ("is_active", "is_staff", "is_superuser")}),
        ("Activity", {"fields": ("last_login", "created_at", "updated_at")}),
    )

    add_fieldsets = (
        (
            None,
            {
                "classes": ("wide",),
                "fields": ("email", "full_name", "role", "password1", "password2"),
            },
        ),
    )

    @admin.display(boolean=True, description="Vendor")
    def owns_vendor(self, obj):
        return hasattr(obj, "vendor_profile")
