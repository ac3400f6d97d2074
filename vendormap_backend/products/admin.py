# products/admin.py

from __future__ import annotations

from django.contrib import admin

from products.models import Product


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = ("name", "vendor", "price", "created_at")
    search_fields = ("name", "description", "vendor__name")
    list_select_related = ("vendor",)
    readonly_fields = ("id", "created_at", "updated_at")
    raw_id_fields = ("vendor",)
