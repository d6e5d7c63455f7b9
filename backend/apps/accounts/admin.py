"""Admin configuration for accounts app."""

from django.contrib import admin

from apps.accounts.models import User


@admin.register(User)
class UserAdmin(admin.ModelAdmin):
    """Admin for User model."""

    list_display = ["email", "name", "organization", "is_active", "created_at"]
    list_filter = ["is_active", "is_staff"]
    search_fields = ["email", "name", "organization__name"]
    readonly_fields = ["created_at", "updated_at", "last_login"]
    exclude = ["password"]
    ordering = ["-created_at"]
