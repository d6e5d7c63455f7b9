"""Admin configuration for organizations app."""

from django.contrib import admin

from apps.organizations.models import Organization


@admin.register(Organization)
class OrganizationAdmin(admin.ModelAdmin):
    """Admin for Organization model. Entitlement fields are reconciliation-owned."""

    list_display = ["name", "slug", "current_plan", "seat_limit", "updated_at"]
    list_filter = ["current_plan"]
    search_fields = ["name", "slug"]
    readonly_fields = ["current_plan", "seat_limit", "created_at", "updated_at"]
