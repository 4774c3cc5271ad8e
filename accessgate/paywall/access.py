"""
Decision only: AccessResolver.resolve_access(content_id, identity) -> AccessDecision.

Priority, first match wins:
- creator of the content -> granted
- settlement contract checkAccess flag -> granted
- recorded one-off payment for this exact item -> granted
- live subscription to the creator (creator has an active offer) -> granted
- otherwise denied with the listed price

The on-chain flag is consulted before off-chain ledgers so a stale
subscription record never shadows a direct purchase.
"""
from __future__ import annotations

import logging

from accessgate.chain.reader import ChainReader, ContentRecord
from accessgate.content.ids import normalize_address, to_content_id
from accessgate.core.errors import NotFoundError
from accessgate.paywall.models import AccessDecision, AccessReason, PaymentOptions
from accessgate.payments.ledger import PaymentLedger
from accessgate.subscriptions.service import SubscriptionLedger
from accessgate.utils.currency import format_usdc
from accessgate.utils.metrics import access_decisions_total

logger = logging.getLogger(__name__)


class AccessResolver:
    def __init__(
        self,
        chain: ChainReader,
        subscriptions: SubscriptionLedger,
        payments: PaymentLedger,
    ):
        self.chain = chain
        self.subscriptions = subscriptions
        self.payments = payments

    def get_content(self, content_id: str) -> ContentRecord:
        canonical = to_content_id(content_id)
        content = self.chain.get_content(canonical)
        if content is None:
            raise NotFoundError("Content not found", detail={"content_id": canonical})
        return content

    def resolve_access(self, content_id: str, identity: str) -> AccessDecision:
        identity = normalize_address(identity)
        content = self.get_content(content_id)

        decision = self._decide(content, identity)
        access_decisions_total.labels(reason=decision.reason.value).inc()
        logger.info(
            "access_decision",
            extra={
                "content_id": content.content_id,
                "identity": identity,
                "reason": decision.reason.value,
            },
        )
        return decision

    def _decide(self, content: ContentRecord, identity: str) -> AccessDecision:
        creator = content.creator.lower()

        if identity == creator:
            return self._granted(content, identity, AccessReason.CREATOR)

        if self.chain.check_access(identity, content.content_id):
            return self._granted(content, identity, AccessReason.ONCHAIN)

        if self.payments.check_payment(content.content_id, identity):
            return self._granted(content, identity, AccessReason.PAYMENT)

        offer = self.subscriptions.get_creator_offer(creator)
        if offer is not None and offer.is_active:
            status = self.subscriptions.check_subscription(creator, identity)
            if status.has_active_subscription:
                return self._granted(content, identity, AccessReason.SUBSCRIPTION)

        return AccessDecision(
            content_id=content.content_id,
            identity=identity,
            granted=False,
            reason=AccessReason.PAYMENT_REQUIRED,
            payment_options=PaymentOptions(
                pay_to=creator,
                price=content.price,
                price_display=format_usdc(content.price),
                subscription_fee=offer.monthly_fee if offer is not None and offer.is_active else None,
            ),
        )

    @staticmethod
    def _granted(content: ContentRecord, identity: str, reason: AccessReason) -> AccessDecision:
        return AccessDecision(
            content_id=content.content_id,
            identity=identity,
            granted=True,
            reason=reason,
            storage_pointer=content.storage_pointer,
        )
