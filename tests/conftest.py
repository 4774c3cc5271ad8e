"""Shared fixtures: in-memory store, deterministic chain reader, fixed clock."""
from datetime import datetime, timezone

import pytest

from accessgate.chain.abi import TRANSFER_TOPIC
from accessgate.chain.reader import ChainReader, ContentRecord, LogEntry, Receipt, Transaction
from accessgate.content.ids import to_content_id
from accessgate.core.config import settings
from accessgate.storage.kv import MemoryStore

CREATOR = "0x" + "a" * 40
PAYER = "0x" + "b" * 40
OTHER = "0x" + "c" * 40
TOKEN = settings.token_contract_address
TX_HASH = "0x" + "1" * 64


def address_topic(address: str) -> str:
    return "0x" + "0" * 24 + address[2:].lower()


def transfer_log(sender: str, recipient: str, value: int, token: str = TOKEN) -> LogEntry:
    return LogEntry(
        address=token,
        topics=[TRANSFER_TOPIC, address_topic(sender), address_topic(recipient)],
        data="0x" + value.to_bytes(32, "big").hex(),
    )


class FakeChainReader(ChainReader):
    """Deterministic chain snapshot for tests."""

    def __init__(self) -> None:
        self.transactions: dict[str, Transaction] = {}
        self.receipts: dict[str, Receipt] = {}
        self.contents: dict[str, ContentRecord] = {}
        self.access: set[tuple[str, str]] = set()
        self.error: Exception | None = None

    def add_payment(
        self,
        tx_hash: str,
        logs: list[LogEntry],
        to: str = TOKEN,
        status: int = 1,
        sender: str = PAYER,
    ) -> None:
        self.transactions[tx_hash] = Transaction(hash=tx_hash, from_address=sender, to_address=to, block_number=100)
        self.receipts[tx_hash] = Receipt(
            transaction_hash=tx_hash, status=status, block_number=100, gas_used=52_000, logs=logs,
        )

    def add_content(self, content_id: str, creator: str = CREATOR, price: int = 1_000_000) -> ContentRecord:
        canonical = to_content_id(content_id)
        record = ContentRecord(
            content_id=canonical,
            creator=creator,
            price=price,
            storage_pointer="Qm" + "a" * 44,
            is_active=True,
            created_at=1_700_000_000,
        )
        self.contents[canonical] = record
        return record

    def grant(self, identity: str, content_id: str) -> None:
        self.access.add((identity.lower(), to_content_id(content_id)))

    def _raise(self) -> None:
        if self.error is not None:
            raise self.error

    def get_transaction(self, tx_hash: str) -> Transaction | None:
        self._raise()
        return self.transactions.get(tx_hash)

    def get_receipt(self, tx_hash: str) -> Receipt | None:
        self._raise()
        return self.receipts.get(tx_hash)

    def get_content(self, content_id: str) -> ContentRecord | None:
        self._raise()
        return self.contents.get(content_id)

    def check_access(self, identity: str, content_id: str) -> bool:
        self._raise()
        return (identity.lower(), content_id) in self.access


class Clock:
    """Mutable clock; call to read, assign .now to move."""

    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture
def store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def chain() -> FakeChainReader:
    return FakeChainReader()


@pytest.fixture
def clock() -> Clock:
    return Clock(datetime(2025, 1, 1, 12, 0, tzinfo=timezone.utc))
