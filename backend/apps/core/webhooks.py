"""
Completion markers for inbound provider webhooks.

A marker is written once every side effect of an event has succeeded (for
Stripe payments: the ledger entry and the entitlement update). An event
without a marker is re-run in full on redelivery; one with a marker is
acknowledged without doing anything.
"""

from django.db import IntegrityError, transaction

from apps.core.logging import get_logger
from apps.core.models import ProcessedWebhook

logger = get_logger(__name__)


def is_webhook_processed(source: str, event_id: str) -> bool:
    """
    True if a delivery of this event already finished every step.

    Args:
        source: Webhook provider (e.g., 'stripe')
        event_id: Provider event id (e.g., 'evt_xxx')
    """
    return ProcessedWebhook.objects.filter(source=source, event_id=event_id).exists()


def mark_webhook_processed(source: str, event_id: str) -> bool:
    """
    Record that an event finished. Call only after its last side effect.

    Two overlapping deliveries may both finish; the unique (source,
    event_id) constraint keeps one marker and the loser gets False.

    Returns:
        True if this call wrote the marker, False if another delivery did.
    """
    try:
        with transaction.atomic():
            ProcessedWebhook.objects.create(source=source, event_id=event_id)
        return True
    except IntegrityError:
        logger.debug("webhook_already_finished", source=source, event_id=event_id)
        return False
