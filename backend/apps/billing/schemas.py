"""
Billing API schemas - request/response types for billing endpoints, and the
metadata contract carried on every PaymentIntent.
"""

from collections.abc import Mapping
from datetime import datetime
from decimal import Decimal
from typing import Any

from ninja import Schema
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from apps.core.logging import get_logger

logger = get_logger(__name__)


class CamelSchema(Schema):
    """Schema exposed with camelCase keys on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class PaymentIntentMetadata(BaseModel):
    """
    Internal identifiers written into PaymentIntent metadata at checkout and
    read back when the payment succeeds.

    Stripe metadata is a flat string map, so ``to_stripe`` renders every
    field as a string and an unresolved organization as "".
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
        frozen=True,
    )

    user_id: str = Field(min_length=1)
    plan_id: int = Field(gt=0)
    organization_id: int | None = None
    plan_name: str = ""

    @field_validator("user_id", mode="before")
    @classmethod
    def _user_id_as_string(cls, value: Any) -> Any:
        return str(value) if isinstance(value, int) else value

    @field_validator("organization_id", mode="before")
    @classmethod
    def _unusable_organization_is_none(cls, value: Any) -> int | None:
        """
        Blank or non-integer organization ids become None.

        Only userId and planId are required; a payment whose organization
        cannot be read is still recorded in the ledger.
        """
        if value is None or (isinstance(value, str) and not value.strip()):
            return None
        try:
            return int(value)
        except (TypeError, ValueError):
            logger.warning("payment_intent_organization_unreadable", organization_id=str(value))
            return None

    @classmethod
    def from_stripe(cls, metadata: Mapping[str, Any] | None) -> "PaymentIntentMetadata":
        """
        Parse metadata from a PaymentIntent.

        Raises:
            pydantic.ValidationError: userId or planId missing or malformed.
                A malformed organizationId is not an error.
        """
        return cls.model_validate(dict(metadata or {}))

    def to_stripe(self) -> dict[str, str]:
        """Render as a Stripe metadata map."""
        return {
            "userId": self.user_id,
            "planId": str(self.plan_id),
            "organizationId": "" if self.organization_id is None else str(self.organization_id),
            "planName": self.plan_name,
        }


class PaymentIntentRequest(CamelSchema):
    """
    Request to start a checkout.

    Only identifiers are read. Any price or amount the client sends is
    dropped by the schema, and planName is informational.
    """

    plan_id: int | None = None
    user_id: str | int | None = None
    email: str | None = None
    plan_name: str | None = None


class PaymentIntentResponse(CamelSchema):
    """Client secret for the payment sheet plus the Stripe customer."""

    client_secret: str
    customer_id: str


class PortalSessionRequest(CamelSchema):
    """Request to create a Stripe Customer Portal session."""

    customer_id: str
    return_url: str


class PortalSessionResponse(CamelSchema):
    """Response with Customer Portal URL."""

    portal_url: str


class EntitlementResponse(CamelSchema):
    """An organization's current plan and seat limit."""

    organization_id: int
    plan_id: int | None
    seat_limit: int


class LedgerEntryResponse(CamelSchema):
    """One recorded payment."""

    source_event_id: str
    payment_intent_id: str
    plan_id: int
    organization_id: int | None
    start_date: datetime
    end_date: datetime
    amount: Decimal
    currency: str
    is_current: bool


class SubscriptionHistoryResponse(CamelSchema):
    """A user's payment history, newest first."""

    user_id: str
    active: LedgerEntryResponse | None
    entries: list[LedgerEntryResponse]
