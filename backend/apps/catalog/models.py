"""
Catalog models - plans customers can pay for.
"""

from django.db import models

from apps.core.models import TimestampedModel


class Plan(TimestampedModel):
    """
    A purchasable plan.

    Price and seat limit are authoritative here; checkout never accepts
    either from the client.
    """

    name = models.CharField(max_length=255, help_text="Display name, e.g. 'Growth'")
    price = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        help_text="Price per period in major currency units, e.g. 349.00",
    )
    seat_limit = models.PositiveIntegerField(
        default=1,
        help_text="Number of seats an organization on this plan may use",
    )
    is_active = models.BooleanField(
        default=True,
        help_text="Inactive plans cannot be purchased",
    )

    class Meta:
        ordering = ["price", "id"]

    def __str__(self) -> str:
        return f"{self.name} ({self.price})"
