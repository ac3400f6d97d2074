# orders/admin.py

from django.contrib import admin

from orders.models import Order


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    list_display = ("id", "vendor", "buyer_name", "status", "created_at")
    list_filter = ("status",)
    search_fields = ("buyer_name", "items", "vendor__name")
    list_select_related = ("vendor",)
    readonly_fields = ("id", "created_at", "updated_at")
    raw_id_fields = ("vendor", "buyer")
