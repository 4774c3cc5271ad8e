"""
PaymentVerifier checks that a claimed transaction really pays the expected
amount of the stablecoin from the expected sender to the expected recipient.

No side effects: recording the payment is a separate step
(accessgate.payments.ledger) so unverifiable claims are never persisted.
"""
import logging

from accessgate.chain import abi
from accessgate.chain.reader import ChainReader
from accessgate.content.ids import normalize_address, normalize_tx_hash
from accessgate.core.config import settings
from accessgate.core.errors import ChainError, ErrorKind
from accessgate.payments.models import PaymentVerification
from accessgate.utils.currency import parse_units
from accessgate.utils.metrics import payment_verifications_total

logger = logging.getLogger(__name__)


class PaymentVerifier:
    def __init__(
        self,
        chain: ChainReader,
        token_address: str | None = None,
        decimals: int | None = None,
    ) -> None:
        self.chain = chain
        self.token_address = normalize_address(token_address or settings.token_contract_address)
        self.decimals = decimals if decimals is not None else settings.token_decimals

    def verify(
        self,
        tx_hash: str,
        expected_recipient: str,
        expected_amount: str,
        expected_sender: str,
    ) -> PaymentVerification:
        """
        Raises ValidationError for malformed input (before any chain call).
        Every chain-side outcome, including NetworkTimeout, is returned as a result.
        """
        tx_hash = normalize_tx_hash(tx_hash)
        recipient = normalize_address(expected_recipient)
        sender = normalize_address(expected_sender)
        expected_value = parse_units(expected_amount, self.decimals)

        try:
            result = self._verify(tx_hash, recipient, sender, expected_value)
        except ChainError as e:
            result = PaymentVerification.failed(tx_hash, e.kind, str(e))

        outcome = "verified" if result.verified else result.failure.value
        payment_verifications_total.labels(outcome=outcome).inc()
        logger.info(
            "payment_verification",
            extra={
                "tx_hash": tx_hash,
                "payer": sender,
                "creator": recipient,
                "amount": expected_value,
                "kind": outcome,
            },
        )
        return result

    def _verify(self, tx_hash: str, recipient: str, sender: str, expected_value: int) -> PaymentVerification:
        tx = self.chain.get_transaction(tx_hash)
        receipt = self.chain.get_receipt(tx_hash)
        if tx is None or receipt is None:
            return PaymentVerification.failed(
                tx_hash, ErrorKind.TRANSACTION_NOT_FOUND, "Transaction or receipt not found",
            )

        if not receipt.succeeded:
            return PaymentVerification.failed(
                tx_hash, ErrorKind.TRANSACTION_FAILED, "Transaction reverted",
                block_number=receipt.block_number,
            )

        if (tx.to_address or "").lower() != self.token_address:
            return PaymentVerification.failed(
                tx_hash, ErrorKind.WRONG_ASSET, "Transaction is not a call to the payment token",
                to_address=tx.to_address,
            )

        match = None
        for log in receipt.logs:
            if log.address.lower() != self.token_address:
                continue
            transfer = abi.decode_transfer(log.topics, log.data)
            if transfer is None:
                continue
            from_addr, to_addr, value = transfer
            if from_addr == sender and to_addr == recipient:
                match = transfer
                break

        if match is None:
            return PaymentVerification.failed(
                tx_hash, ErrorKind.NO_MATCHING_TRANSFER,
                "No token transfer from the expected sender to the expected recipient",
            )

        _, _, value = match
        if value != expected_value:
            return PaymentVerification.failed(
                tx_hash, ErrorKind.AMOUNT_MISMATCH, "Transferred amount does not match",
                value=value, expected_value=expected_value,
                from_address=sender, to_address=recipient,
            )

        return PaymentVerification(
            verified=True,
            tx_hash=tx_hash,
            block_number=receipt.block_number,
            value=value,
            gas_used=receipt.gas_used,
            from_address=sender,
            to_address=recipient,
            expected_value=expected_value,
        )
