"""Catalog exceptions."""

from apps.billing.exceptions import NotFoundError


class PlanNotFoundError(NotFoundError):
    """Raised when a plan id does not resolve to a purchasable plan."""

    def __init__(self, plan_id: object) -> None:
        super().__init__(f"Plan {plan_id} not found.")
        self.plan_id = plan_id
