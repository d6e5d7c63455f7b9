"""
Organizations models - the entitlement holder.
"""

from django.db import models


class Organization(models.Model):
    """
    A customer organization.

    Profile data belongs to the directory. This service owns only the
    entitlement fields (current_plan, seat_limit), written exclusively by
    payment reconciliation.
    """

    name = models.CharField(max_length=255)
    slug = models.SlugField(
        max_length=255,
        unique=True,
        help_text="URL-safe identifier, e.g. 'acme-corp'",
    )

    # Entitlement
    current_plan = models.ForeignKey(
        "catalog.Plan",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="organizations",
        help_text="Plan granted by the most recently reconciled payment",
    )
    seat_limit = models.PositiveIntegerField(
        default=1,
        help_text="Seats allowed by the current plan",
    )

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]

    def __str__(self) -> str:
        return self.name
