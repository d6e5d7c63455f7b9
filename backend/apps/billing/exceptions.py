"""
Billing exceptions.

Every failure the checkout and reconciliation flows can surface. The API
layer maps them to HTTP statuses; the webhook view maps them to the
provider's retry semantics.
"""


class BillingError(Exception):
    """Base exception for billing errors."""

    pass


class ValidationError(BillingError):
    """Caller input is missing or malformed. Terminal, never retried."""

    pass


class NotFoundError(BillingError):
    """A referenced plan or organization does not exist. Terminal."""

    pass


class AuthenticationError(BillingError):
    """Webhook signature verification failed. The payload is never processed."""

    pass


class PaymentProviderError(BillingError):
    """Communication with the payment provider failed."""

    pass


class TransientStoreError(BillingError):
    """
    A ledger or entitlement write failed.

    The webhook answers 5xx so the provider redelivers the whole event.
    """

    pass


class DuplicateEventError(BillingError):
    """
    The event was already applied.

    Not a failure: the processor reports it as a successful no-op and never
    lets it reach the provider as an error.
    """

    def __init__(self, event_id: str) -> None:
        super().__init__(f"Event {event_id} already processed.")
        self.event_id = event_id
