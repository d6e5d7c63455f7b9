"""
Tests for the seed_plans management command.
"""

from decimal import Decimal
from io import StringIO

import pytest
from django.core.management import call_command
from django.core.management.base import CommandError

from apps.catalog.management.commands.seed_plans import DEFAULT_PLANS
from apps.catalog.models import Plan

from .factories import PlanFactory


@pytest.mark.django_db
class TestSeedPlans:
    """Tests for seed_plans."""

    def test_seeds_default_plans(self) -> None:
        call_command("seed_plans", stdout=StringIO())

        assert Plan.objects.count() == len(DEFAULT_PLANS)

    def test_seeds_given_plans(self) -> None:
        call_command("seed_plans", "--plan", "Team:349.00:10", stdout=StringIO())

        plan = Plan.objects.get()
        assert plan.name == "Team"
        assert plan.price == Decimal("349.00")
        assert plan.seat_limit == 10

    def test_keeps_existing_plan_without_force(self) -> None:
        PlanFactory.create(name="Team", price=Decimal("300.00"), seat_limit=5)

        call_command("seed_plans", "--plan", "Team:349.00:10", stdout=StringIO())

        assert Plan.objects.get(name="Team").price == Decimal("300.00")

    def test_force_updates_existing_plan(self) -> None:
        PlanFactory.create(name="Team", price=Decimal("300.00"), seat_limit=5, is_active=False)

        call_command("seed_plans", "--plan", "Team:349.00:10", "--force", stdout=StringIO())

        plan = Plan.objects.get(name="Team")
        assert plan.price == Decimal("349.00")
        assert plan.seat_limit == 10
        assert plan.is_active is True

    def test_rejects_malformed_plan(self) -> None:
        with pytest.raises(CommandError):
            call_command("seed_plans", "--plan", "Team:free:10", stdout=StringIO())
