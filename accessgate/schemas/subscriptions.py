from pydantic import BaseModel, Field

from accessgate.schemas.payments import ADDRESS_PATTERN, TX_HASH_PATTERN


class SubscriptionPairIn(BaseModel):
    creator_address: str = Field(..., pattern=ADDRESS_PATTERN)
    subscriber_address: str = Field(..., pattern=ADDRESS_PATTERN)


class CreateSubscriptionIn(SubscriptionPairIn):
    monthly_fee: str = Field(..., min_length=1)
    tx_hash: str = Field(..., pattern=TX_HASH_PATTERN)


class RenewSubscriptionIn(SubscriptionPairIn):
    tx_hash: str = Field(..., pattern=TX_HASH_PATTERN)


class CreatorOfferIn(BaseModel):
    creator_address: str = Field(..., pattern=ADDRESS_PATTERN)
    monthly_fee: str = Field(..., min_length=1)
    description: str = ""
    benefits: list[str] = Field(default_factory=list)
    is_active: bool = True
