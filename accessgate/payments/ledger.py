"""
PaymentLedger: off-chain record of verified one-off purchases.

Key: payment:{canonical content id}:{payer}. One live record per key;
record_payment overwrites, it never merges or appends.
"""
import logging

from accessgate.content.ids import normalize_address, normalize_tx_hash, to_content_id
from accessgate.payments.models import PaymentRecord
from accessgate.storage.kv import KVStore
from accessgate.utils.currency import parse_units

logger = logging.getLogger(__name__)


def payment_key(content_id: str, payer: str) -> str:
    return f"payment:{content_id}:{payer}"


class PaymentLedger:
    def __init__(self, store: KVStore):
        self.store = store

    def record_payment(
        self,
        content_id: str,
        payer: str,
        tx_hash: str,
        amount: str,
        timestamp: int,
    ) -> PaymentRecord:
        """Persist a payment the caller has already verified on-chain."""
        parse_units(amount)  # reject malformed amounts before writing
        record = PaymentRecord(
            content_id=to_content_id(content_id),
            payer=normalize_address(payer),
            tx_hash=normalize_tx_hash(tx_hash),
            amount=amount,
            timestamp=int(timestamp),
        )
        key = payment_key(record.content_id, record.payer)
        previous = self.store.get(key)
        self.store.set(key, record.model_dump())
        logger.info(
            "payment_recorded",
            extra={
                "content_id": record.content_id,
                "payer": record.payer,
                "tx_hash": record.tx_hash,
                "reason": "overwrite" if previous else "new",
            },
        )
        return record

    def get_payment(self, content_id: str, payer: str) -> PaymentRecord | None:
        raw = self.store.get(payment_key(to_content_id(content_id), normalize_address(payer)))
        return PaymentRecord.model_validate(raw) if raw else None

    def check_payment(self, content_id: str, payer: str) -> bool:
        return self.get_payment(content_id, payer) is not None

    def list_payments(self, payer: str) -> list[PaymentRecord]:
        """Every item the payer has a recorded payment for."""
        payer = normalize_address(payer)
        return [
            PaymentRecord.model_validate(value)
            for _, value in self.store.scan("payment:", lambda key, _: key.endswith(f":{payer}"))
        ]
