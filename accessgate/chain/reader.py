"""
Read-only chain access used by the payment verifier and the access resolver.
Implementations: JsonRpcChainReader (accessgate.chain.rpc); tests substitute fakes.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass, field

ZERO_ADDRESS = "0x" + "0" * 40


@dataclass
class LogEntry:
    """Event log from a transaction receipt."""
    address: str
    topics: list[str]
    data: str


@dataclass
class Transaction:
    hash: str
    from_address: str
    to_address: str | None
    block_number: int | None = None


@dataclass
class Receipt:
    transaction_hash: str
    status: int  # 1 = success, 0 = reverted
    block_number: int
    gas_used: int
    logs: list[LogEntry] = field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        return self.status == 1


@dataclass
class ContentRecord:
    """Settlement contract entry for one content item."""
    content_id: str  # canonical bytes32 hex
    creator: str
    price: int  # token units, 6 implied decimals
    storage_pointer: str  # IPFS CID
    is_active: bool
    created_at: int  # unix seconds

    @property
    def exists(self) -> bool:
        return self.creator != ZERO_ADDRESS


class ChainReader(ABC):
    """
    Timeouts raise NetworkTimeout; transport and RPC errors raise ChainUnavailable.
    "Not found" is a None return, never an exception.
    """

    @abstractmethod
    def get_transaction(self, tx_hash: str) -> Transaction | None:
        raise NotImplementedError

    @abstractmethod
    def get_receipt(self, tx_hash: str) -> Receipt | None:
        raise NotImplementedError

    @abstractmethod
    def get_content(self, content_id: str) -> ContentRecord | None:
        """Content by canonical bytes32 id; None when the contract has no entry."""
        raise NotImplementedError

    @abstractmethod
    def check_access(self, identity: str, content_id: str) -> bool:
        """Settlement contract's per-(identity, content) access flag."""
        raise NotImplementedError
