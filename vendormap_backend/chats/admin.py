# chats/admin.py

from django.contrib import admin

from chats.models import Chat, Message


class MessageInline(admin.TabularInline):
    model = Message
    extra = 0
    readonly_fields = ("sender", "text", "created_at")
    can_delete = False


@admin.register(Chat)
class ChatAdmin(admin.ModelAdmin):
    list_display = ("id", "vendor", "last_updated", "created_at")
    readonly_fields = ("id", "created_at")
    raw_id_fields = ("vendor",)
    filter_horizontal = ("participants",)
    inlines = [MessageInline]
