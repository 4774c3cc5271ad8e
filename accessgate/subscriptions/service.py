"""
SubscriptionLedger: monthly creator subscriptions on the durable KV store.

Responsibilities:
- create / renew / cancel subscription records
- liveness check (status == active and end_date > now, computed on read)
- creator subscription offers (one row per creator, last write wins)

renew and cancel are read-modify-write without a lock: concurrent writers for
the same (creator, subscriber) race and the last write wins.
"""
import hashlib
import logging
import math
from datetime import datetime, timedelta, timezone
from typing import Callable

from accessgate.content.ids import normalize_address, normalize_tx_hash
from accessgate.core.config import settings
from accessgate.core.errors import NotFoundError
from accessgate.storage.kv import KVStore
from accessgate.subscriptions.models import (
    CreatorSubscriptionOffer,
    Subscription,
    SubscriptionState,
    SubscriptionStatus,
)
from accessgate.utils.currency import parse_units
from accessgate.utils.metrics import subscription_operations_total

logger = logging.getLogger(__name__)

DAY = timedelta(days=1)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def subscription_key(creator: str, subscriber: str) -> str:
    return f"subscription:{creator}:{subscriber}"


def offer_key(creator: str) -> str:
    return f"creator_subscription_settings:{creator}"


def generate_subscription_id(creator: str, subscriber: str, now: datetime) -> str:
    millis = int(now.timestamp() * 1000)
    data = f"{creator}:{subscriber}:{millis}".encode()
    return hashlib.sha256(data).hexdigest()[:16]


class SubscriptionLedger:
    def __init__(
        self,
        store: KVStore,
        clock: Callable[[], datetime] = utcnow,
        period_days: int | None = None,
    ):
        self.store = store
        self.clock = clock
        days = period_days if period_days is not None else settings.subscription_period_days
        self.period = timedelta(days=days)

    # ------------------------------------------------------------------
    # Subscriptions
    # ------------------------------------------------------------------

    def _load(self, creator: str, subscriber: str) -> Subscription | None:
        raw = self.store.get(subscription_key(creator, subscriber))
        return Subscription.model_validate(raw) if raw else None

    def _save(self, subscription: Subscription) -> None:
        self.store.set(
            subscription_key(subscription.creator_address, subscription.subscriber_address),
            subscription.model_dump(mode="json"),
        )

    def create_subscription(
        self,
        creator: str,
        subscriber: str,
        monthly_fee: str,
        tx_hash: str,
    ) -> Subscription:
        """
        Create or overwrite the (creator, subscriber) subscription for one period
        from now. The caller must already have verified tx_hash pays monthly_fee
        to creator. Overwriting a live subscription drops its remaining time;
        use renew_subscription to extend.
        """
        creator = normalize_address(creator)
        subscriber = normalize_address(subscriber)
        tx_hash = normalize_tx_hash(tx_hash)
        parse_units(monthly_fee)
        now = self.clock()
        end = now + self.period
        subscription = Subscription(
            id=generate_subscription_id(creator, subscriber, now),
            creator_address=creator,
            subscriber_address=subscriber,
            monthly_fee=monthly_fee,
            start_date=now,
            end_date=end,
            status=SubscriptionState.ACTIVE,
            tx_hash=tx_hash,
            last_payment_date=now,
            next_payment_date=end,
        )
        self._save(subscription)
        subscription_operations_total.labels(operation="create").inc()
        logger.info(
            "subscription_created",
            extra={"creator": creator, "subscriber": subscriber, "tx_hash": tx_hash},
        )
        return subscription

    def check_subscription(self, creator: str, subscriber: str) -> SubscriptionStatus:
        subscription = self._load(normalize_address(creator), normalize_address(subscriber))
        if subscription is None:
            return SubscriptionStatus(has_active_subscription=False)

        now = self.clock()
        live = subscription.is_live(now)
        days_remaining = math.ceil((subscription.end_date - now) / DAY) if live else 0
        return SubscriptionStatus(
            has_active_subscription=live,
            subscription=subscription if live else None,
            expires_at=subscription.end_date,
            days_remaining=days_remaining,
        )

    def renew_subscription(self, creator: str, subscriber: str, tx_hash: str) -> Subscription:
        """
        Extend by one period from max(end_date, now): early renewal keeps unused
        time, renewal after lapse restarts from now. Forces status back to active.
        """
        creator = normalize_address(creator)
        subscriber = normalize_address(subscriber)
        tx_hash = normalize_tx_hash(tx_hash)
        existing = self._load(creator, subscriber)
        if existing is None:
            raise NotFoundError(
                "No existing subscription found",
                detail={"creator": creator, "subscriber": subscriber},
            )

        now = self.clock()
        new_end = max(existing.end_date, now) + self.period
        renewed = existing.model_copy(update={
            "end_date": new_end,
            "status": SubscriptionState.ACTIVE,
            "tx_hash": tx_hash,
            "last_payment_date": now,
            "next_payment_date": new_end,
        })
        self._save(renewed)
        subscription_operations_total.labels(operation="renew").inc()
        logger.info(
            "subscription_renewed",
            extra={"creator": creator, "subscriber": subscriber, "tx_hash": tx_hash},
        )
        return renewed

    def cancel_subscription(self, creator: str, subscriber: str) -> Subscription:
        """Revokes access immediately; end_date is left as it was."""
        creator = normalize_address(creator)
        subscriber = normalize_address(subscriber)
        existing = self._load(creator, subscriber)
        if existing is None:
            raise NotFoundError(
                "No subscription found",
                detail={"creator": creator, "subscriber": subscriber},
            )
        cancelled = existing.model_copy(update={"status": SubscriptionState.CANCELLED})
        self._save(cancelled)
        subscription_operations_total.labels(operation="cancel").inc()
        logger.info("subscription_cancelled", extra={"creator": creator, "subscriber": subscriber})
        return cancelled

    def list_creator_subscriptions(self, creator: str) -> list[Subscription]:
        """Live subscriptions to creator."""
        creator = normalize_address(creator)
        return self._scan_live(f"subscription:{creator}:")

    def list_subscriber_subscriptions(self, subscriber: str) -> list[Subscription]:
        """Live subscriptions held by subscriber."""
        subscriber = normalize_address(subscriber)
        return self._scan_live(
            "subscription:",
            lambda key, _: key.endswith(f":{subscriber}"),
        )

    def _scan_live(self, prefix: str, predicate=None) -> list[Subscription]:
        now = self.clock()
        subscriptions = (Subscription.model_validate(v) for _, v in self.store.scan(prefix, predicate))
        return [s for s in subscriptions if s.is_live(now)]

    # ------------------------------------------------------------------
    # Creator offers
    # ------------------------------------------------------------------

    def set_creator_offer(
        self,
        creator: str,
        monthly_fee: str,
        description: str,
        benefits: list[str],
        is_active: bool = True,
    ) -> CreatorSubscriptionOffer:
        creator = normalize_address(creator)
        parse_units(monthly_fee)
        now = self.clock()
        previous = self.get_creator_offer(creator)
        offer = CreatorSubscriptionOffer(
            creator_address=creator,
            monthly_fee=monthly_fee,
            description=description,
            benefits=list(benefits),
            is_active=is_active,
            created_at=previous.created_at if previous else now,
            updated_at=now,
        )
        self.store.set(offer_key(creator), offer.model_dump(mode="json"))
        logger.info("creator_offer_saved", extra={"creator": creator, "amount": monthly_fee})
        return offer

    def get_creator_offer(self, creator: str) -> CreatorSubscriptionOffer | None:
        raw = self.store.get(offer_key(normalize_address(creator)))
        return CreatorSubscriptionOffer.model_validate(raw) if raw else None
