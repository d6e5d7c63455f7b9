"""
Stripe client configuration.

One StripeClient per process, built from settings on first use and then
shared. Services receive it as an argument instead of touching the global
``stripe`` module state.
"""

from functools import lru_cache

import stripe

from config.settings.base import settings

# API version the payment intent and webhook payload shapes are written against
STRIPE_API_VERSION = "2025-06-30.basil"

# Stripe SDK has 80s default timeout which is reasonable for payment APIs.
# Retries are safe due to automatic idempotency key generation.
STRIPE_MAX_NETWORK_RETRIES = 2


def build_stripe_client(api_key: str) -> stripe.StripeClient:
    """Construct a configured StripeClient."""
    return stripe.StripeClient(
        api_key,
        stripe_version=STRIPE_API_VERSION,
        max_network_retries=STRIPE_MAX_NETWORK_RETRIES,
    )


@lru_cache(maxsize=1)
def get_stripe_client() -> stripe.StripeClient:
    """
    Get the process-wide StripeClient.

    Raises:
        RuntimeError: STRIPE_SECRET_KEY is not configured.
    """
    if not settings.STRIPE_SECRET_KEY:
        raise RuntimeError("STRIPE_SECRET_KEY is not configured")
    return build_stripe_client(settings.STRIPE_SECRET_KEY)
