"""
Tests for Stripe webhook handler.

Deliveries are signed with the test webhook secret exactly the way Stripe
signs them, so signature verification runs for real.
"""

import hashlib
import hmac
import json
import time
from decimal import Decimal
from unittest.mock import patch

import pytest
from django.test import Client

from apps.billing.exceptions import TransientStoreError
from apps.billing.models import SubscriptionLedgerEntry
from apps.core.models import ProcessedWebhook
from config.settings.base import settings
from tests.catalog.factories import PlanFactory
from tests.organizations.factories import OrganizationFactory

WEBHOOK_URL = "/webhooks/stripe/"


def sign_payload(payload: str, secret: str | None = None, timestamp: int | None = None) -> str:
    """Build a Stripe-Signature header for ``payload``."""
    secret = secret or settings.STRIPE_WEBHOOK_SECRET
    timestamp = int(time.time()) if timestamp is None else timestamp
    signature = hmac.new(
        secret.encode("utf-8"), f"{timestamp}.{payload}".encode("utf-8"), hashlib.sha256
    ).hexdigest()
    return f"t={timestamp},v1={signature}"


def build_webhook_payload(
    event_type: str = "payment_intent.succeeded",
    event_id: str = "evt_123",
    metadata: dict | None = None,
    amount: int = 34900,
) -> str:
    """Build a serialized Stripe webhook event."""
    if metadata is None:
        metadata = {"userId": "7", "planId": "2", "organizationId": "42", "planName": "Team"}
    return json.dumps(
        {
            "id": event_id,
            "object": "event",
            "type": event_type,
            "data": {
                "object": {
                    "id": "pi_test_123",
                    "object": "payment_intent",
                    "amount": amount,
                    "amount_received": amount,
                    "currency": "brl",
                    "status": "succeeded",
                    "metadata": metadata,
                }
            },
        }
    )


def post_webhook(client: Client, payload: str, signature: str | None = None):
    """POST a delivery, signing it unless a signature is given."""
    return client.post(
        WEBHOOK_URL,
        data=payload,
        content_type="application/json",
        HTTP_STRIPE_SIGNATURE=signature if signature is not None else sign_payload(payload),
    )


@pytest.fixture
def team_plan(db):
    return PlanFactory.create(id=2, name="Team", price=Decimal("349.00"), seat_limit=10)


@pytest.fixture
def org(db):
    return OrganizationFactory.create(id=42)


class TestStripeWebhookSignatureVerification:
    """Tests for webhook signature verification."""

    def test_missing_signature_header_returns_400(self, client: Client) -> None:
        response = client.post(
            WEBHOOK_URL, data=build_webhook_payload(), content_type="application/json"
        )

        assert response.status_code == 400
        assert "error" in response.json()

    @patch("apps.billing.webhooks.settings")
    def test_missing_webhook_secret_returns_500(self, mock_settings, client: Client) -> None:
        mock_settings.STRIPE_WEBHOOK_SECRET = ""

        response = post_webhook(client, build_webhook_payload(), signature="t=1,v1=abc")

        assert response.status_code == 500

    @pytest.mark.django_db
    def test_wrong_secret_returns_400(self, client: Client, team_plan, org) -> None:
        payload = build_webhook_payload()

        response = post_webhook(client, payload, signature=sign_payload(payload, secret="whsec_other"))

        assert response.status_code == 400
        assert not SubscriptionLedgerEntry.objects.exists()

    @pytest.mark.django_db
    def test_tampered_body_returns_400(self, client: Client, team_plan, org) -> None:
        payload = build_webhook_payload()
        signature = sign_payload(payload)
        tampered = payload.replace('"organizationId": "42"', '"organizationId": "43"')

        response = post_webhook(client, tampered, signature=signature)

        assert response.status_code == 400
        assert not SubscriptionLedgerEntry.objects.exists()
        org.refresh_from_db()
        assert org.current_plan_id is None

    @pytest.mark.django_db
    def test_stale_timestamp_returns_400(self, client: Client, team_plan, org) -> None:
        payload = build_webhook_payload()

        response = post_webhook(
            client, payload, signature=sign_payload(payload, timestamp=int(time.time()) - 3600)
        )

        assert response.status_code == 400

    def test_invalid_json_returns_400(self, client: Client) -> None:
        payload = "not json"

        response = post_webhook(client, payload)

        assert response.status_code == 400

    def test_get_not_allowed(self, client: Client) -> None:
        assert client.get(WEBHOOK_URL).status_code == 405


@pytest.mark.django_db
class TestStripeWebhookReconciliation:
    """End-to-end delivery tests."""

    def test_succeeded_payment_updates_entitlement(self, client: Client, team_plan, org) -> None:
        response = post_webhook(client, build_webhook_payload())

        assert response.status_code == 200
        assert response.json() == {"received": True}
        entry = SubscriptionLedgerEntry.objects.get()
        assert entry.source_event_id == "evt_123"
        assert entry.owner_user_id == "7"
        assert entry.plan_id == 2
        assert entry.amount == Decimal("349.00")
        org.refresh_from_db()
        assert org.current_plan_id == 2
        assert org.seat_limit == 10

    def test_duplicate_delivery_is_acknowledged_once(self, client: Client, team_plan, org) -> None:
        payload = build_webhook_payload()

        first = post_webhook(client, payload)
        second = post_webhook(client, payload)

        assert first.status_code == 200
        assert second.status_code == 200
        assert SubscriptionLedgerEntry.objects.count() == 1
        assert ProcessedWebhook.objects.filter(event_id="evt_123").count() == 1

    def test_missing_organization_acknowledged_without_entitlement(
        self, client: Client, team_plan
    ) -> None:
        payload = build_webhook_payload(
            metadata={"userId": "7", "planId": "2", "organizationId": ""}
        )

        response = post_webhook(client, payload)

        assert response.status_code == 200
        assert SubscriptionLedgerEntry.objects.get().organization_id is None

    def test_unreadable_organization_still_records_payment(
        self, client: Client, team_plan, org
    ) -> None:
        payload = build_webhook_payload(
            metadata={"userId": "7", "planId": "2", "organizationId": "acme"}
        )

        response = post_webhook(client, payload)

        assert response.status_code == 200
        entry = SubscriptionLedgerEntry.objects.get()
        assert entry.owner_user_id == "7"
        assert entry.organization_id is None
        org.refresh_from_db()
        assert org.current_plan_id is None

    def test_event_without_payment_intent_acknowledged(self, client: Client) -> None:
        payload = json.dumps({"id": "evt_123", "type": "payment_intent.succeeded", "data": {}})

        response = post_webhook(client, payload)

        assert response.status_code == 200
        assert not SubscriptionLedgerEntry.objects.exists()

    def test_incomplete_metadata_acknowledged(self, client: Client, team_plan, org) -> None:
        response = post_webhook(client, build_webhook_payload(metadata={"planId": "2"}))

        assert response.status_code == 200
        assert not SubscriptionLedgerEntry.objects.exists()

    def test_unhandled_event_type_acknowledged(self, client: Client, team_plan, org) -> None:
        response = post_webhook(client, build_webhook_payload(event_type="payment_intent.payment_failed"))

        assert response.status_code == 200
        assert not SubscriptionLedgerEntry.objects.exists()

    def test_entitlement_failure_returns_500_then_retry_succeeds(
        self, client: Client, team_plan, org
    ) -> None:
        payload = build_webhook_payload()

        with patch(
            "apps.billing.services.update_entitlement",
            side_effect=TransientStoreError("db down"),
        ):
            failed = post_webhook(client, payload)

        assert failed.status_code == 500
        assert SubscriptionLedgerEntry.objects.count() == 1
        assert not ProcessedWebhook.objects.exists()

        retried = post_webhook(client, payload)

        assert retried.status_code == 200
        assert SubscriptionLedgerEntry.objects.count() == 1
        org.refresh_from_db()
        assert org.current_plan_id == 2
        assert org.seat_limit == 10

    def test_unexpected_error_returns_500(self, client: Client, team_plan, org) -> None:
        with patch(
            "apps.billing.webhooks.process_stripe_event", side_effect=RuntimeError("boom")
        ):
            response = post_webhook(client, build_webhook_payload())

        assert response.status_code == 500
