"""
Billing services - checkout and payment reconciliation.

All Stripe API calls are isolated here for testability and receive the
process-wide StripeClient as an argument.
External calls must NOT be inside database transactions.
"""

import enum
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Any

import pydantic
import stripe
from django.db import DatabaseError
from django.utils import timezone

from apps.accounts.services import get_organization_id_for_user
from apps.billing.exceptions import (
    DuplicateEventError,
    NotFoundError,
    PaymentProviderError,
    TransientStoreError,
    ValidationError,
)
from apps.billing.models import SubscriptionLedgerEntry
from apps.billing.money import to_major_units, to_minor_units
from apps.billing.schemas import PaymentIntentMetadata
from apps.catalog.exceptions import PlanNotFoundError
from apps.catalog.services import get_plan
from apps.core.logging import bind_contextvars, get_logger
from apps.core.webhooks import is_webhook_processed, mark_webhook_processed
from apps.organizations.services import get_organization, update_entitlement
from config.settings.base import settings

logger = get_logger(__name__)

WEBHOOK_SOURCE = "stripe"


class ReconciliationOutcome(enum.StrEnum):
    """How a webhook event ended. Every outcome is acknowledged to Stripe."""

    RECONCILED = "reconciled"  # ledger entry and entitlement applied
    LEDGER_ONLY = "ledger_only"  # payment recorded, no entitlement to update
    DUPLICATE = "duplicate"  # event already fully processed
    INCOMPLETE_METADATA = "incomplete_metadata"  # userId/planId missing, nothing applied
    IGNORED = "ignored"  # event type this service does not act on


@dataclass(frozen=True)
class CheckoutResult:
    """What the payment sheet needs, plus what was charged."""

    client_secret: str
    customer_id: str
    payment_intent_id: str
    amount: int
    currency: str


@dataclass(frozen=True)
class NewLedgerEntry:
    """Fields of a ledger entry about to be appended."""

    owner_user_id: str
    plan_id: int
    organization_id: int | None
    start_date: datetime
    end_date: datetime
    amount: Decimal
    currency: str
    payment_intent_id: str = ""


@dataclass(frozen=True)
class LedgerAppendResult:
    """Result of append_ledger_entry_if_absent."""

    inserted: bool
    entry: SubscriptionLedgerEntry


# ---------------------------------------------------------------------------
# Checkout
# ---------------------------------------------------------------------------


def get_or_create_stripe_customer(
    client: stripe.StripeClient,
    email: str,
    *,
    user_id: str,
    organization_id: int | None,
) -> str:
    """
    Find the Stripe customer for an email, creating one if none exists.

    Reuse is by exact email match and the first result wins; emails are
    unique upstream.

    Returns the Stripe customer ID.
    """
    existing = client.v1.customers.list(params={"email": email, "limit": 1})
    if existing.data:
        return existing.data[0].id

    customer = client.v1.customers.create(
        params={
            "email": email,
            "name": user_id,
            "metadata": {
                "userId": user_id,
                "organizationId": "" if organization_id is None else str(organization_id),
            },
        }
    )
    logger.info("stripe_customer_created", customer_id=customer.id, **{"usr.id": user_id})
    return customer.id


def create_payment_intent(
    client: stripe.StripeClient,
    *,
    plan_id: int | str | None,
    user_id: int | str | None,
    email: str | None,
    plan_name: str | None = None,
) -> CheckoutResult:
    """
    Create a PaymentIntent for a plan.

    The amount always comes from the catalog; plan_name is accepted only so
    callers can send it and is never used. The intent's metadata is the
    only way the webhook later learns who paid for what, so it is set on
    every intent.

    Raises:
        ValidationError: plan_id, user_id or email missing.
        NotFoundError: Unknown plan.
        PaymentProviderError: Stripe request failed.
    """
    user_id = str(user_id).strip() if user_id is not None else ""
    email = (email or "").strip()
    if plan_id in (None, "") or not user_id or not email:
        raise ValidationError("planId, userId and email are required.")

    plan = get_plan(plan_id)

    organization_id = get_organization_id_for_user(user_id)
    if organization_id is None:
        logger.warning("checkout_organization_unresolved", plan_id=plan.id, **{"usr.id": user_id})

    currency = settings.STRIPE_CURRENCY
    amount = to_minor_units(plan.price, currency)
    metadata = PaymentIntentMetadata(
        user_id=user_id,
        plan_id=plan.id,
        organization_id=organization_id,
        plan_name=plan.name,
    )

    logger.info(
        "checkout_started",
        plan_id=plan.id,
        amount=amount,
        currency=currency,
        **{"usr.id": user_id, "organization.id": str(organization_id or "")},
    )

    try:
        customer_id = get_or_create_stripe_customer(
            client, email, user_id=user_id, organization_id=organization_id
        )
        intent = client.v1.payment_intents.create(
            params={
                "amount": amount,
                "currency": currency,
                "customer": customer_id,
                "automatic_payment_methods": {"enabled": True},
                "description": f"Subscription: {plan.name}",
                "metadata": metadata.to_stripe(),
            }
        )
    except stripe.StripeError as e:
        logger.error("checkout_stripe_error", error=str(e), plan_id=plan.id)
        raise PaymentProviderError("Payment provider request failed.") from e

    logger.info("payment_intent_created", payment_intent_id=intent.id, customer_id=customer_id)

    return CheckoutResult(
        client_secret=intent.client_secret,
        customer_id=customer_id,
        payment_intent_id=intent.id,
        amount=amount,
        currency=currency,
    )


def create_customer_portal_session(
    client: stripe.StripeClient, customer_id: str, return_url: str
) -> str:
    """
    Create a Stripe Customer Portal session.

    Returns the portal URL.
    """
    if not customer_id:
        raise ValidationError("customerId is required.")

    try:
        session = client.v1.billing_portal.sessions.create(
            params={"customer": customer_id, "return_url": return_url}
        )
    except stripe.StripeError as e:
        logger.error("portal_stripe_error", error=str(e), customer_id=customer_id)
        raise PaymentProviderError("Payment provider request failed.") from e

    return session.url


# ---------------------------------------------------------------------------
# Reconciliation store
# ---------------------------------------------------------------------------


def append_ledger_entry_if_absent(event_id: str, entry: NewLedgerEntry) -> LedgerAppendResult:
    """
    Record a payment unless this event already recorded one.

    Backed by the unique constraint on source_event_id (get_or_create
    retries the lookup after an IntegrityError), so concurrent deliveries of
    one event cannot both insert.

    Raises:
        TransientStoreError: The database failed.
    """
    try:
        ledger_entry, created = SubscriptionLedgerEntry.objects.get_or_create(
            source_event_id=event_id,
            defaults={
                "owner_user_id": entry.owner_user_id,
                "plan_id": entry.plan_id,
                "organization_id": entry.organization_id,
                "start_date": entry.start_date,
                "end_date": entry.end_date,
                "amount": entry.amount,
                "currency": entry.currency,
                "payment_intent_id": entry.payment_intent_id,
            },
        )
    except DatabaseError as e:
        logger.error("ledger_append_failed", source_event_id=event_id, error=str(e))
        raise TransientStoreError(f"Failed to append ledger entry for event {event_id}") from e

    if created:
        logger.info(
            "ledger_entry_appended",
            source_event_id=event_id,
            plan_id=entry.plan_id,
            amount=str(entry.amount),
            **{"usr.id": entry.owner_user_id},
        )

    return LedgerAppendResult(inserted=created, entry=ledger_entry)


# ---------------------------------------------------------------------------
# Webhook event processing
# ---------------------------------------------------------------------------


def handle_payment_intent_succeeded(
    event_id: str, payment_intent: Mapping[str, Any] | None
) -> ReconciliationOutcome:
    """
    Apply a succeeded PaymentIntent: append the ledger entry, then update
    the organization's entitlement.

    A redelivery after a failed entitlement update finds its ledger entry
    already present and only repeats the entitlement update.

    Raises:
        TransientStoreError: Ledger or entitlement write failed; the caller
            must answer 5xx so Stripe redelivers.
    """
    if payment_intent is None:
        # Redelivery cannot add the missing object, so this is acknowledged
        logger.warning("payment_intent_missing_from_event")
        return ReconciliationOutcome.INCOMPLETE_METADATA

    payment_intent_id = payment_intent.get("id", "")

    try:
        metadata = PaymentIntentMetadata.from_stripe(payment_intent.get("metadata"))
    except pydantic.ValidationError as e:
        # Redelivery cannot fix missing metadata, so this is acknowledged
        logger.warning(
            "payment_intent_metadata_incomplete",
            payment_intent_id=payment_intent_id,
            fields=[".".join(str(p) for p in err["loc"]) for err in e.errors()],
        )
        return ReconciliationOutcome.INCOMPLETE_METADATA

    bind_contextvars(**{"usr.id": metadata.user_id})

    currency = (payment_intent.get("currency") or settings.STRIPE_CURRENCY).lower()
    amount_minor = payment_intent.get("amount_received") or payment_intent.get("amount") or 0
    start_date = timezone.now()

    logger.info(
        "payment_confirmed",
        payment_intent_id=payment_intent_id,
        plan_id=metadata.plan_id,
        amount=amount_minor,
        **{"organization.id": str(metadata.organization_id or "")},
    )

    result = append_ledger_entry_if_absent(
        event_id,
        NewLedgerEntry(
            owner_user_id=metadata.user_id,
            plan_id=metadata.plan_id,
            organization_id=metadata.organization_id,
            start_date=start_date,
            end_date=start_date + timedelta(days=settings.SUBSCRIPTION_PERIOD_DAYS),
            amount=to_major_units(amount_minor, currency),
            currency=currency,
            payment_intent_id=payment_intent_id,
        ),
    )
    if not result.inserted:
        logger.info("ledger_entry_already_recorded", source_event_id=event_id)

    if metadata.organization_id is None:
        logger.warning("payment_without_organization", payment_intent_id=payment_intent_id)
        return ReconciliationOutcome.LEDGER_ONLY

    try:
        plan = get_plan(metadata.plan_id, include_inactive=True)
    except PlanNotFoundError:
        logger.error("reconciliation_plan_not_found", plan_id=metadata.plan_id)
        return ReconciliationOutcome.LEDGER_ONLY

    if not update_entitlement(metadata.organization_id, plan.id, plan.seat_limit):
        logger.error(
            "reconciliation_organization_not_found",
            **{"organization.id": str(metadata.organization_id)},
        )
        return ReconciliationOutcome.LEDGER_ONLY

    return ReconciliationOutcome.RECONCILED


def ensure_event_not_finished(event_id: str) -> None:
    """
    Stop work on an event whose earlier delivery completed.

    Raises:
        DuplicateEventError: A previous delivery of this event already
            finished every step.
    """
    if is_webhook_processed(WEBHOOK_SOURCE, event_id):
        raise DuplicateEventError(event_id)


def _event_object(event: Mapping[str, Any]) -> Mapping[str, Any] | None:
    """The event's data.object, or None when the payload lacks one."""
    data = event.get("data")
    obj = data.get("object") if isinstance(data, Mapping) else None
    return obj if isinstance(obj, Mapping) else None


def process_stripe_event(event: Mapping[str, Any]) -> ReconciliationOutcome:
    """
    Dispatch a verified Stripe event.

    Only payment_intent.succeeded changes state. The event is marked
    processed after its handler returns, so a handler that raised will run
    again on redelivery.
    """
    event_id = event["id"]
    event_type = event["type"]
    bind_contextvars(**{"stripe.event_id": event_id, "stripe.event_type": event_type})

    match event_type:
        case "payment_intent.succeeded":
            try:
                ensure_event_not_finished(event_id)
            except DuplicateEventError:
                logger.info("stripe_webhook_duplicate")
                return ReconciliationOutcome.DUPLICATE

            outcome = handle_payment_intent_succeeded(event_id, _event_object(event))

            mark_webhook_processed(WEBHOOK_SOURCE, event_id)

            logger.info("stripe_webhook_processed", outcome=outcome.value)
            return outcome

        case _:
            logger.debug("stripe_webhook_unhandled_event")
            return ReconciliationOutcome.IGNORED


# ---------------------------------------------------------------------------
# Queries
# ---------------------------------------------------------------------------


def get_entitlement(organization_id: int) -> tuple[int, int | None, int]:
    """
    Current entitlement of an organization as (organization_id, plan_id, seat_limit).

    Raises:
        NotFoundError: Unknown organization.
    """
    org = get_organization(organization_id)
    if org is None:
        raise NotFoundError(f"Organization {organization_id} not found.")
    return org.id, org.current_plan_id, org.seat_limit


def list_subscription_history(user_id: str) -> list[SubscriptionLedgerEntry]:
    """Ledger entries paid by a user, newest first."""
    return list(SubscriptionLedgerEntry.objects.filter(owner_user_id=str(user_id)))
