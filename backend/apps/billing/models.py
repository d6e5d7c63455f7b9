"""
Billing models - the subscription history ledger.
"""

from django.db import models
from django.utils import timezone


class SubscriptionLedgerEntry(models.Model):
    """
    One confirmed payment, recorded once and never changed.

    source_event_id is the Stripe event that confirmed the payment; its
    unique constraint is what makes redelivered events harmless. Plan and
    organization are stored as plain ids so history survives catalog and
    directory changes.
    """

    source_event_id = models.CharField(
        max_length=255,
        unique=True,
        help_text="Stripe event ID that confirmed this payment, e.g. 'evt_xxx'",
    )
    payment_intent_id = models.CharField(
        max_length=255,
        blank=True,
        db_index=True,
        help_text="Stripe PaymentIntent ID, e.g. 'pi_xxx'",
    )
    owner_user_id = models.CharField(
        max_length=255,
        db_index=True,
        help_text="Internal id of the paying user",
    )
    plan_id = models.PositiveBigIntegerField(help_text="Catalog plan paid for")
    organization_id = models.PositiveBigIntegerField(
        null=True,
        blank=True,
        db_index=True,
        help_text="Organization entitled by this payment, if one was resolved",
    )
    start_date = models.DateTimeField()
    end_date = models.DateTimeField()
    amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        help_text="Amount received, in major currency units",
    )
    currency = models.CharField(max_length=3, default="brl")

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-start_date", "-id"]
        verbose_name_plural = "subscription ledger entries"

    def __str__(self) -> str:
        return f"{self.owner_user_id} - plan {self.plan_id} ({self.source_event_id})"

    def save(self, *args, **kwargs) -> None:
        if not self._state.adding:
            raise ValueError("Subscription ledger entries are append-only")
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ValueError("Subscription ledger entries are append-only")

    @property
    def is_current(self) -> bool:
        """True while the paid period covers the present moment."""
        return self.start_date <= timezone.now() < self.end_date
