"""
Shared pytest fixtures for all tests.

This module provides common fixtures used across multiple test modules.
Individual test modules can override these fixtures if needed.

Factories
---------
Import factories directly from their modules:

    from tests.accounts.factories import UserFactory
    from tests.billing.factories import LedgerEntryFactory
    from tests.catalog.factories import PlanFactory
    from tests.organizations.factories import OrganizationFactory

Example usage:

    @pytest.mark.django_db
    def test_something():
        org = OrganizationFactory.create()
        user = UserFactory.create(organization=org)
"""

from decimal import Decimal
from unittest.mock import MagicMock

import pytest
from django.test import Client, RequestFactory


@pytest.fixture
def request_factory() -> RequestFactory:
    """
    Django request factory for unit testing views.

    Use this when you need to call a view function directly without going
    through URL routing.
    """
    return RequestFactory()


@pytest.fixture
def api_client() -> Client:
    """
    Django test client for full HTTP request/response cycle tests.

    Use this when you need to test the complete HTTP flow including middleware,
    routing, and response handling.

    Example:
        def test_api_returns_200(api_client):
            response = api_client.get("/api/v1/health")
            assert response.status_code == 200
    """
    return Client()


@pytest.fixture
def stripe_client() -> MagicMock:
    """
    Mock StripeClient with a customer lookup that finds nothing.

    Services reach Stripe through ``client.v1.<resource>.<method>``, so tests
    configure return values on that path.

    Example:
        def test_checkout(stripe_client):
            stripe_client.v1.payment_intents.create.return_value = MagicMock(id="pi_1")
    """
    client = MagicMock()
    client.v1.customers.list.return_value = MagicMock(data=[])
    client.v1.customers.create.return_value = MagicMock(id="cus_test_123")
    client.v1.payment_intents.create.return_value = MagicMock(
        id="pi_test_123", client_secret="pi_test_123_secret_abc"
    )
    return client


@pytest.fixture
def plan(db):
    """An active plan priced 349.00 with 10 seats."""
    from tests.catalog.factories import PlanFactory

    return PlanFactory.create(name="Team", price=Decimal("349.00"), seat_limit=10)


@pytest.fixture
def organization(db):
    """An organization on no plan yet."""
    from tests.organizations.factories import OrganizationFactory

    return OrganizationFactory.create()


@pytest.fixture
def user(organization):
    """A user belonging to ``organization``."""
    from tests.accounts.factories import UserFactory

    return UserFactory.create(organization=organization)
