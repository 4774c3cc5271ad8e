"""
DTO payments: PaymentVerification (result of verify), PaymentRecord (ledger row).
"""
from __future__ import annotations

from pydantic import BaseModel, Field

from accessgate.core.errors import ErrorKind


class PaymentVerification(BaseModel):
    """Discriminated verification result: verified=True, or failure carries the kind."""

    verified: bool
    tx_hash: str
    failure: ErrorKind | None = Field(
        None,
        description="Why verification failed; None when verified",
    )
    message: str | None = None
    block_number: int | None = None
    value: int | None = Field(None, description="Matched transfer value in token units")
    gas_used: int | None = None
    from_address: str | None = None
    to_address: str | None = None
    expected_value: int | None = None

    model_config = {"frozen": True}

    @classmethod
    def failed(cls, tx_hash: str, kind: ErrorKind, message: str, **extra) -> "PaymentVerification":
        return cls(verified=False, tx_hash=tx_hash, failure=kind, message=message, **extra)


class PaymentRecord(BaseModel):
    """One live record per (content_id, payer); a new write replaces the old one."""

    content_id: str  # canonical bytes32 hex
    payer: str  # lowercased
    tx_hash: str
    amount: str  # decimal string as paid, e.g. "1.00"
    timestamp: int  # unix seconds as supplied by the caller
