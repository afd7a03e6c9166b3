"""
Pydantic models for subscription data.

``SubscriptionCreate`` is the body of ``POST /api/subscriptions``;
``SubscriptionUpdate`` is the partial body of ``PATCH``; and
``SubscriptionRead`` is what every endpoint returns.  The owner is
never part of a request body: it is always taken from the session.

``cost`` travels as a decimal string with two places (``"15.99"``).
Dates accept ``YYYY-MM-DD`` or full ISO timestamps and are returned
as UTC timestamps.
"""

from datetime import datetime
from typing import Literal, Optional

from pydantic import Field, field_validator

from .base import CamelModel, parse_cost, parse_timestamp


BillingCycle = Literal["monthly", "annual"]
SubscriptionStatus = Literal["active", "inactive", "expiring"]

BILLING_CYCLES = ("monthly", "annual")
SUBSCRIPTION_STATUSES = ("active", "inactive", "expiring")


class SubscriptionBase(CamelModel):
    name: str = Field(..., min_length=1, max_length=200, examples=["Netflix"])
    category: str = Field(..., min_length=1, max_length=100, examples=["Streaming"])
    cost: str = Field(..., examples=["15.99"])
    billing_cycle: BillingCycle = Field(..., examples=["monthly"])
    renewal_date: datetime = Field(..., examples=["2025-01-15"])
    expiration_date: Optional[datetime] = Field(None, examples=["2025-12-31"])
    status: SubscriptionStatus = Field(..., examples=["active"])
    logo_url: Optional[str] = None
    description: Optional[str] = None

    @field_validator("cost", mode="before")
    @classmethod
    def _cost(cls, value):
        return parse_cost(value)

    @field_validator("renewal_date", "expiration_date", mode="before")
    @classmethod
    def _dates(cls, value):
        if value == "":
            # Forms send an empty string for "no expiration date".
            return None
        return parse_timestamp(value)


class SubscriptionCreate(SubscriptionBase):
    """Schema for creating a subscription."""
    pass


class SubscriptionUpdate(CamelModel):
    """Schema for updating a subscription.

    All fields are optional; only provided fields will be updated.
    ``status`` accepts any of the listed values regardless of the
    current one.
    """

    name: Optional[str] = Field(None, min_length=1, max_length=200)
    category: Optional[str] = Field(None, min_length=1, max_length=100)
    cost: Optional[str] = None
    billing_cycle: Optional[BillingCycle] = None
    renewal_date: Optional[datetime] = None
    expiration_date: Optional[datetime] = None
    status: Optional[SubscriptionStatus] = None
    logo_url: Optional[str] = None
    description: Optional[str] = None

    @field_validator("cost", mode="before")
    @classmethod
    def _cost(cls, value):
        return parse_cost(value)

    @field_validator("renewal_date", "expiration_date", mode="before")
    @classmethod
    def _dates(cls, value):
        if value is None or value == "":
            return None
        return parse_timestamp(value)

    def changes(self) -> dict:
        """Return only the fields the client actually sent with a value."""
        return {k: v for k, v in self.model_dump(exclude_unset=True).items() if v is not None}


class SubscriptionRead(SubscriptionBase):
    """Schema for reading a subscription from the API."""

    id: str
    owner_email: str
    last_used: Optional[datetime] = None
