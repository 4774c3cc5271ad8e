"""
DTO paywall: AccessReason, PaymentOptions (price hint on denial), AccessDecision.
"""
from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field


class AccessReason(str, Enum):
    CREATOR = "creator"
    ONCHAIN = "onchain"
    PAYMENT = "payment"
    SUBSCRIPTION = "subscription"
    PAYMENT_REQUIRED = "payment_required"


# ----- What the caller needs to start a payment -----


class PaymentOptions(BaseModel):
    """Price hint returned with a denial."""

    pay_to: str = Field(..., description="Creator address to send the token transfer to")
    price: int = Field(..., description="Price in token units (6 decimals)")
    price_display: str = Field(..., description="Human-readable price, e.g. '1.00 USDC'")
    subscription_fee: str | None = Field(
        None,
        description="Creator's monthly fee when an active subscription offer exists",
    )

    model_config = {"frozen": True}


# ----- Access decision -----


class AccessDecision(BaseModel):
    """Result of resolve_access. Infrastructure failures raise instead of returning granted=False."""

    content_id: str
    identity: str
    granted: bool
    reason: AccessReason
    storage_pointer: str | None = Field(
        None,
        description="Where the content descriptor lives; set only when granted",
    )
    payment_options: PaymentOptions | None = Field(
        None,
        description="Set only when denied",
    )

    model_config = {"frozen": True}
