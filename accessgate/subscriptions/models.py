"""
DTO subscriptions: Subscription, CreatorSubscriptionOffer, SubscriptionStatus.
"""
from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field


class SubscriptionState(str, Enum):
    # "expired" is derived at read time and never stored
    ACTIVE = "active"
    CANCELLED = "cancelled"


class Subscription(BaseModel):
    id: str
    creator_address: str
    subscriber_address: str
    monthly_fee: str
    start_date: datetime
    end_date: datetime
    status: SubscriptionState
    tx_hash: str
    last_payment_date: datetime
    next_payment_date: datetime

    def is_live(self, now: datetime) -> bool:
        return self.status == SubscriptionState.ACTIVE and self.end_date > now


class CreatorSubscriptionOffer(BaseModel):
    """One row per creator, upserted wholesale."""

    creator_address: str
    monthly_fee: str
    description: str = ""
    benefits: list[str] = Field(default_factory=list)
    is_active: bool = True
    created_at: datetime
    updated_at: datetime


class SubscriptionStatus(BaseModel):
    """Result of check_subscription."""

    has_active_subscription: bool
    subscription: Subscription | None = Field(
        None,
        description="Present only while the subscription is live",
    )
    expires_at: datetime | None = Field(
        None,
        description="Stored end date whenever a record exists, live or not",
    )
    days_remaining: int = 0
