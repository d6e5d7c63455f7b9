"""
Catalog API schemas.
"""

from decimal import Decimal

from ninja import Schema
from pydantic import ConfigDict
from pydantic.alias_generators import to_camel


class PlanResponse(Schema):
    """A plan as shown on the pricing page."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: int
    name: str
    price: Decimal
    seat_limit: int
