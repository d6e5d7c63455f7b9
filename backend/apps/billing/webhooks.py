"""
Stripe webhook handler.

Receives payment_intent events from Stripe. This is a plain Django view
(not Django Ninja) because signature verification needs the raw request
body exactly as Stripe sent it.
"""

import json
from typing import Any

import stripe
from django.http import HttpRequest, JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_POST

from apps.billing.exceptions import AuthenticationError, TransientStoreError
from apps.billing.services import process_stripe_event
from apps.core.logging import get_logger
from config.settings.base import settings

logger = get_logger(__name__)


def verify_stripe_event(payload: bytes, sig_header: str, secret: str) -> dict[str, Any]:
    """
    Verify the signature over the raw body and parse the event.

    Signatures older than Stripe's default tolerance (5 minutes) are
    rejected as replays.

    Raises:
        AuthenticationError: Bad signature, stale timestamp or unparseable body.
    """
    try:
        stripe.WebhookSignature.verify_header(
            payload.decode("utf-8"), sig_header, secret, stripe.Webhook.DEFAULT_TOLERANCE
        )
        event = json.loads(payload)
    except stripe.SignatureVerificationError as e:
        logger.warning("stripe_webhook_invalid_signature", error=str(e))
        raise AuthenticationError("Invalid signature.") from e
    except ValueError as e:
        logger.warning("stripe_webhook_invalid_payload", error=str(e))
        raise AuthenticationError("Invalid payload.") from e

    if not isinstance(event, dict) or not event.get("id") or not event.get("type"):
        logger.warning("stripe_webhook_invalid_payload", error="missing id or type")
        raise AuthenticationError("Invalid payload.")

    return event


@csrf_exempt
@require_POST
def stripe_webhook(request: HttpRequest) -> JsonResponse:
    """
    Handle Stripe webhook events.

    200 acknowledges (including duplicates and ignored types), 400 rejects
    unauthenticated deliveries, 500 asks Stripe to retry.
    """
    payload = request.body
    sig_header = request.headers.get("Stripe-Signature")

    if not sig_header:
        logger.warning("stripe_webhook_missing_signature")
        return JsonResponse({"error": "Missing Stripe-Signature header."}, status=400)

    if not settings.STRIPE_WEBHOOK_SECRET:
        logger.error("stripe_webhook_secret_not_configured")
        return JsonResponse({"error": "Webhook secret not configured."}, status=500)

    try:
        event = verify_stripe_event(payload, sig_header, settings.STRIPE_WEBHOOK_SECRET)
    except AuthenticationError as e:
        return JsonResponse({"error": str(e)}, status=400)

    logger.info("stripe_webhook_received", event_type=event["type"], event_id=event["id"])

    try:
        process_stripe_event(event)
    except TransientStoreError:
        logger.exception("stripe_webhook_store_error")
        # Return 500 so Stripe will retry with exponential backoff
        return JsonResponse({"error": "Temporary storage failure."}, status=500)
    except Exception:
        logger.exception("stripe_webhook_handler_error")
        return JsonResponse({"error": "Internal error."}, status=500)

    return JsonResponse({"received": True})
