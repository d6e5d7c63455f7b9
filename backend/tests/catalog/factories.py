"""
Factories for catalog app models.

Used in tests to create test data.
"""

from decimal import Decimal

import factory
from factory.django import DjangoModelFactory

from apps.catalog.models import Plan


class PlanFactory(DjangoModelFactory):
    """Factory for Plan model."""

    class Meta:
        model = Plan

    name = factory.Sequence(lambda n: f"Plan {n}")
    price = Decimal("99.90")
    seat_limit = 5
    is_active = True
