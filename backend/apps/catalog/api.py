"""
Catalog API endpoints.
"""

from django.http import HttpRequest
from ninja import Router

from apps.catalog.schemas import PlanResponse
from apps.catalog.services import list_active_plans

router = Router(tags=["catalog"])


@router.get(
    "/plans",
    response={200: list[PlanResponse]},
    by_alias=True,
    operation_id="listPlans",
    summary="List purchasable plans",
)
def list_plans(request: HttpRequest) -> list[PlanResponse]:
    """Active plans with their authoritative price and seat limit."""
    return [
        PlanResponse(id=plan.id, name=plan.name, price=plan.price, seat_limit=plan.seat_limit)
        for plan in list_active_plans()
    ]
