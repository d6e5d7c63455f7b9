"""Admin configuration for catalog app."""

from django.contrib import admin

from apps.catalog.models import Plan


@admin.register(Plan)
class PlanAdmin(admin.ModelAdmin):
    """Admin for Plan model."""

    list_display = ["name", "price", "seat_limit", "is_active", "updated_at"]
    list_filter = ["is_active"]
    search_fields = ["name"]
    readonly_fields = ["created_at", "updated_at"]
