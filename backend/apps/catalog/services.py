"""
Price catalog lookup.
"""

from apps.catalog.exceptions import PlanNotFoundError
from apps.catalog.models import Plan


def get_plan(plan_id: int | str, *, include_inactive: bool = False) -> Plan:
    """
    Resolve a plan by id.

    Checkout only sells active plans; reconciliation passes
    include_inactive=True because a plan retired after payment still
    defines what the customer paid for.

    Raises:
        PlanNotFoundError: Unknown id, non-integer id, or inactive plan.
    """
    try:
        pk = int(plan_id)
    except (TypeError, ValueError):
        raise PlanNotFoundError(plan_id) from None

    queryset = Plan.objects.all() if include_inactive else Plan.objects.filter(is_active=True)
    try:
        return queryset.get(pk=pk)
    except Plan.DoesNotExist:
        raise PlanNotFoundError(plan_id) from None


def list_active_plans() -> list[Plan]:
    """Plans currently for sale, cheapest first."""
    return list(Plan.objects.filter(is_active=True))
