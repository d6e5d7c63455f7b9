"""
Tests for organization entitlement writes.
"""

from unittest.mock import patch

import pytest
from django.db import DatabaseError

from apps.billing.exceptions import TransientStoreError
from apps.organizations.models import Organization
from apps.organizations.services import get_organization, update_entitlement
from tests.catalog.factories import PlanFactory

from .factories import OrganizationFactory


@pytest.mark.django_db
class TestUpdateEntitlement:
    """Tests for update_entitlement."""

    def test_sets_plan_and_seat_limit(self, organization, plan) -> None:
        assert update_entitlement(organization.id, plan.id, 10) is True

        organization.refresh_from_db()
        assert organization.current_plan_id == plan.id
        assert organization.seat_limit == 10

    def test_unknown_organization_returns_false(self, plan) -> None:
        assert update_entitlement(999_999, plan.id, 10) is False

    def test_last_write_wins(self, organization) -> None:
        first = PlanFactory.create(seat_limit=10)
        second = PlanFactory.create(seat_limit=3)

        update_entitlement(organization.id, first.id, first.seat_limit)
        update_entitlement(organization.id, second.id, second.seat_limit)

        organization.refresh_from_db()
        assert organization.current_plan_id == second.id
        assert organization.seat_limit == 3

    def test_leaves_other_organizations_alone(self, organization, plan) -> None:
        other = OrganizationFactory.create(seat_limit=2)

        update_entitlement(organization.id, plan.id, 10)

        other.refresh_from_db()
        assert other.current_plan_id is None
        assert other.seat_limit == 2

    def test_database_error_is_transient(self, organization, plan) -> None:
        with patch("apps.organizations.services.Organization.objects") as mock_objects:
            mock_objects.filter.return_value.update.side_effect = DatabaseError("db down")

            with pytest.raises(TransientStoreError):
                update_entitlement(organization.id, plan.id, 10)


@pytest.mark.django_db
class TestGetOrganization:
    """Tests for get_organization."""

    def test_returns_organization_with_plan(self, plan) -> None:
        org = OrganizationFactory.create(current_plan=plan, seat_limit=10)

        found = get_organization(org.id)

        assert found == org
        assert found.current_plan == plan

    def test_unknown_returns_none(self) -> None:
        assert get_organization(999_999) is None


@pytest.mark.django_db
class TestOrganizationModel:
    """Tests for Organization model defaults."""

    def test_new_organization_has_no_plan(self) -> None:
        org = Organization.objects.create(name="Acme", slug="acme")

        assert org.current_plan is None
        assert org.seat_limit == 1
        assert str(org) == "Acme"
