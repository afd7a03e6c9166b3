"""
Pydantic models for the marketplace catalog.

Catalog entries are read-only through the API.  ``AvailableServiceCreate``
is only used by the seeding command.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import Field, field_validator

from .base import CamelModel, parse_cost
from .subscription import BillingCycle


class PricingPlan(CamelModel):
    id: str = Field(..., min_length=1, examples=["netflix-standard"])
    name: str = Field(..., min_length=1, examples=["Standard"])
    price: float = Field(..., ge=0, examples=[15.49])
    billing_cycle: BillingCycle = Field(..., examples=["monthly"])
    features: List[str] = Field(default_factory=list)


class AvailableServiceBase(CamelModel):
    name: str = Field(..., min_length=1, examples=["Netflix"])
    category: str = Field(..., min_length=1, examples=["Streaming"])
    logo_url: str
    description: str
    base_price: str = Field(..., examples=["6.99"])
    plans: List[PricingPlan]
    is_popular: bool = False
    features: List[str] = Field(default_factory=list)
    launch_url: Optional[str] = Field(None, examples=["https://www.netflix.com"])

    @field_validator("base_price", mode="before")
    @classmethod
    def _base_price(cls, value):
        return parse_cost(value)


class AvailableServiceCreate(AvailableServiceBase):
    """Catalog entry as found in a seed file.  ``id`` is optional there."""

    id: Optional[str] = None


class AvailableServiceRead(AvailableServiceBase):
    id: str
    created_at: datetime

    def find_plan(self, plan_id: str) -> Optional[PricingPlan]:
        return next((plan for plan in self.plans if plan.id == plan_id), None)


class SubscribeRequest(CamelModel):
    """Body of the one-click subscribe endpoint."""

    service_id: str = Field(..., min_length=1)
    plan_id: str = Field(..., min_length=1)
