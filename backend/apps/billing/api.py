"""
Billing API endpoints.

Checkout payment intents, customer portal, and the reconciled
subscription/entitlement state.
"""

from django.http import HttpRequest
from ninja import Router

from apps.billing.models import SubscriptionLedgerEntry
from apps.billing.schemas import (
    EntitlementResponse,
    LedgerEntryResponse,
    PaymentIntentRequest,
    PaymentIntentResponse,
    PortalSessionRequest,
    PortalSessionResponse,
    SubscriptionHistoryResponse,
)
from apps.billing.services import (
    create_customer_portal_session,
    create_payment_intent,
    get_entitlement,
    list_subscription_history,
)
from apps.billing.stripe_client import get_stripe_client
from apps.core.schemas import ErrorResponse

router = Router(tags=["billing"])


def _ledger_entry_response(entry: SubscriptionLedgerEntry) -> LedgerEntryResponse:
    return LedgerEntryResponse(
        source_event_id=entry.source_event_id,
        payment_intent_id=entry.payment_intent_id,
        plan_id=entry.plan_id,
        organization_id=entry.organization_id,
        start_date=entry.start_date,
        end_date=entry.end_date,
        amount=entry.amount,
        currency=entry.currency,
        is_current=entry.is_current,
    )


@router.post(
    "/payment-intent",
    response={200: PaymentIntentResponse, 400: ErrorResponse},
    by_alias=True,
    operation_id="createPaymentIntent",
    summary="Create a payment intent for a plan",
)
def create_payment_intent_endpoint(
    request: HttpRequest, payload: PaymentIntentRequest
) -> PaymentIntentResponse:
    """
    Start a checkout for a plan.

    The charged amount is the catalog price; any price sent by the client
    is ignored. Returns the client secret for the payment sheet.
    """
    result = create_payment_intent(
        get_stripe_client(),
        plan_id=payload.plan_id,
        user_id=payload.user_id,
        email=payload.email,
        plan_name=payload.plan_name,
    )
    return PaymentIntentResponse(client_secret=result.client_secret, customer_id=result.customer_id)


@router.post(
    "/portal",
    response={200: PortalSessionResponse, 400: ErrorResponse},
    by_alias=True,
    operation_id="createPortalSession",
    summary="Create Stripe Customer Portal session",
)
def create_portal(request: HttpRequest, payload: PortalSessionRequest) -> PortalSessionResponse:
    """Returns URL to redirect the customer to manage payment methods and invoices."""
    portal_url = create_customer_portal_session(
        get_stripe_client(), payload.customer_id, payload.return_url
    )
    return PortalSessionResponse(portal_url=portal_url)


@router.get(
    "/organizations/{organization_id}/entitlement",
    response={200: EntitlementResponse, 404: ErrorResponse},
    by_alias=True,
    operation_id="getEntitlement",
    summary="Get an organization's current plan and seat limit",
)
def get_entitlement_endpoint(request: HttpRequest, organization_id: int) -> EntitlementResponse:
    org_id, plan_id, seat_limit = get_entitlement(organization_id)
    return EntitlementResponse(organization_id=org_id, plan_id=plan_id, seat_limit=seat_limit)


@router.get(
    "/users/{user_id}/subscriptions",
    response={200: SubscriptionHistoryResponse},
    by_alias=True,
    operation_id="listSubscriptions",
    summary="List a user's recorded payments",
)
def list_subscriptions(request: HttpRequest, user_id: str) -> SubscriptionHistoryResponse:
    """
    Payment history from the ledger, newest first.

    ``active`` is the newest entry whose paid period covers now.
    """
    entries = [_ledger_entry_response(entry) for entry in list_subscription_history(user_id)]
    active = next((entry for entry in entries if entry.is_current), None)
    return SubscriptionHistoryResponse(user_id=user_id, active=active, entries=entries)
