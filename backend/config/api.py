"""
Django Ninja API configuration.
"""

from django.http import HttpRequest, HttpResponse
from ninja import NinjaAPI
from ninja.errors import ValidationError as NinjaValidationError

from apps.billing.api import router as billing_router
from apps.billing.exceptions import (
    BillingError,
    NotFoundError,
    PaymentProviderError,
    TransientStoreError,
)
from apps.catalog.api import router as catalog_router
from apps.core.logging import get_logger

logger = get_logger(__name__)

api = NinjaAPI(
    title="Payment Reconciliation API",
    version="1.0.0",
    description="Checkout intents, subscription history and organization entitlements.",
    openapi_extra={
        "info": {
            "contact": {"name": "API Support"},
        },
        "tags": [
            {
                "name": "billing",
                "description": "Payment intents, subscription ledger and entitlements",
            },
            {
                "name": "catalog",
                "description": "Plan catalog",
            },
            {
                "name": "health",
                "description": "Service health and readiness checks",
            },
        ],
    },
)

# Register routers
api.add_router("/billing", billing_router)
api.add_router("/catalog", catalog_router)


@api.exception_handler(NinjaValidationError)
def handle_request_validation_error(
    request: HttpRequest, exc: NinjaValidationError
) -> HttpResponse:
    """Render malformed request bodies as 400 {error} instead of 422."""
    return api.create_response(request, {"error": "Invalid request payload."}, status=400)


@api.exception_handler(BillingError)
def handle_billing_error(request: HttpRequest, exc: BillingError) -> HttpResponse:
    """
    Render domain errors as {error}.

    Lookup failures on query endpoints are 404, store failures are 500,
    everything else is a terminal client error.
    """
    if isinstance(exc, TransientStoreError):
        status = 500
    elif isinstance(exc, NotFoundError) and request.method == "GET":
        status = 404
    else:
        status = 400

    if isinstance(exc, PaymentProviderError):
        logger.warning("payment_provider_error", error=str(exc))

    return api.create_response(request, {"error": str(exc)}, status=status)


@api.get("/health", tags=["health"], operation_id="healthCheck", summary="Health check")
def health_check(request: HttpRequest) -> dict:
    """Health check endpoint for load balancer."""
    return {"status": "ok"}
