"""
Organization entitlement writes.

These are the only writes this service makes to an organization.
"""

from django.db import DatabaseError
from django.utils import timezone

from apps.billing.exceptions import TransientStoreError
from apps.core.logging import get_logger
from apps.organizations.models import Organization

logger = get_logger(__name__)


def update_entitlement(organization_id: int, plan_id: int, seat_limit: int) -> bool:
    """
    Set an organization's current plan and seat limit in a single UPDATE.

    Last write wins; there is no version check.

    Returns:
        True if the organization exists and was updated, False if no such
        organization exists.

    Raises:
        TransientStoreError: The database rejected or failed the write.
    """
    try:
        updated = Organization.objects.filter(pk=organization_id).update(
            current_plan_id=plan_id,
            seat_limit=seat_limit,
            updated_at=timezone.now(),
        )
    except DatabaseError as e:
        logger.error(
            "entitlement_update_failed",
            plan_id=plan_id,
            error=str(e),
            **{"organization.id": str(organization_id)},
        )
        raise TransientStoreError(f"Failed to update entitlement for organization {organization_id}") from e

    if not updated:
        return False

    logger.info(
        "entitlement_updated",
        plan_id=plan_id,
        seat_limit=seat_limit,
        **{"organization.id": str(organization_id)},
    )
    return True


def get_organization(organization_id: int) -> Organization | None:
    """Fetch an organization with its plan, or None."""
    return Organization.objects.select_related("current_plan").filter(pk=organization_id).first()
