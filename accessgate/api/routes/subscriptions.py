from fastapi import APIRouter, Depends, Query

from accessgate.api.deps import get_subscription_ledger
from accessgate.core.errors import NotFoundError
from accessgate.schemas.payments import ADDRESS_PATTERN
from accessgate.schemas.subscriptions import (
    CreateSubscriptionIn,
    CreatorOfferIn,
    RenewSubscriptionIn,
    SubscriptionPairIn,
)
from accessgate.subscriptions.models import CreatorSubscriptionOffer, Subscription, SubscriptionStatus
from accessgate.subscriptions.service import SubscriptionLedger


router = APIRouter(prefix="/subscriptions", tags=["subscriptions"])


@router.post("/create", response_model=Subscription)
def create_subscription(
    body: CreateSubscriptionIn,
    ledger: SubscriptionLedger = Depends(get_subscription_ledger),
) -> Subscription:
    return ledger.create_subscription(
        body.creator_address,
        body.subscriber_address,
        body.monthly_fee,
        body.tx_hash,
    )


@router.post("/check", response_model=SubscriptionStatus)
def check_subscription(
    body: SubscriptionPairIn,
    ledger: SubscriptionLedger = Depends(get_subscription_ledger),
) -> SubscriptionStatus:
    return ledger.check_subscription(body.creator_address, body.subscriber_address)


@router.post("/renew", response_model=Subscription)
def renew_subscription(
    body: RenewSubscriptionIn,
    ledger: SubscriptionLedger = Depends(get_subscription_ledger),
) -> Subscription:
    return ledger.renew_subscription(body.creator_address, body.subscriber_address, body.tx_hash)


@router.post("/cancel", response_model=Subscription)
def cancel_subscription(
    body: SubscriptionPairIn,
    ledger: SubscriptionLedger = Depends(get_subscription_ledger),
) -> Subscription:
    return ledger.cancel_subscription(body.creator_address, body.subscriber_address)


@router.post("/creator", response_model=CreatorSubscriptionOffer)
def set_creator_offer(
    body: CreatorOfferIn,
    ledger: SubscriptionLedger = Depends(get_subscription_ledger),
) -> CreatorSubscriptionOffer:
    return ledger.set_creator_offer(
        body.creator_address,
        body.monthly_fee,
        body.description,
        body.benefits,
        is_active=body.is_active,
    )


@router.get("/creator", response_model=CreatorSubscriptionOffer)
def get_creator_offer(
    creator_address: str = Query(..., pattern=ADDRESS_PATTERN),
    ledger: SubscriptionLedger = Depends(get_subscription_ledger),
) -> CreatorSubscriptionOffer:
    offer = ledger.get_creator_offer(creator_address)
    if offer is None:
        raise NotFoundError("Creator subscription not found", detail={"creator": creator_address.lower()})
    return offer


@router.get("/creator/{creator_address}/subscribers", response_model=list[Subscription])
def list_creator_subscriptions(
    creator_address: str,
    ledger: SubscriptionLedger = Depends(get_subscription_ledger),
) -> list[Subscription]:
    return ledger.list_creator_subscriptions(creator_address)


@router.get("/subscriber/{subscriber_address}", response_model=list[Subscription])
def list_subscriber_subscriptions(
    subscriber_address: str,
    ledger: SubscriptionLedger = Depends(get_subscription_ledger),
) -> list[Subscription]:
    return ledger.list_subscriber_subscriptions(subscriber_address)
