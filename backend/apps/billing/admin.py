"""Admin configuration for billing app."""

from django.contrib import admin

from apps.billing.models import SubscriptionLedgerEntry


@admin.register(SubscriptionLedgerEntry)
class SubscriptionLedgerEntryAdmin(admin.ModelAdmin):
    """Read-only admin for the append-only ledger."""

    list_display = [
        "source_event_id",
        "owner_user_id",
        "plan_id",
        "organization_id",
        "amount",
        "currency",
        "start_date",
        "end_date",
    ]
    list_filter = ["currency", "plan_id"]
    search_fields = ["source_event_id", "payment_intent_id", "owner_user_id"]
    ordering = ["-start_date"]

    def has_add_permission(self, request) -> bool:
        return False

    def has_change_permission(self, request, obj=None) -> bool:
        return False

    def has_delete_permission(self, request, obj=None) -> bool:
        return False
