"""
Error taxonomy for access and payment authorization.

Every failure carries an ErrorKind so callers can tell "access denied" apart
from "decision undeterminable" (timeouts, store outages) without parsing
messages.
"""
from enum import Enum
from typing import Any


class ErrorKind(str, Enum):
    VALIDATION = "validation_error"
    IDENTIFIER_TOO_LONG = "identifier_too_long"
    NOT_FOUND = "not_found"
    # Chain verification outcomes
    TRANSACTION_NOT_FOUND = "transaction_not_found"
    TRANSACTION_FAILED = "transaction_failed"
    WRONG_ASSET = "wrong_asset"
    NO_MATCHING_TRANSFER = "no_matching_transfer"
    AMOUNT_MISMATCH = "amount_mismatch"
    # Chain transport
    NETWORK_TIMEOUT = "network_timeout"
    CHAIN_UNAVAILABLE = "chain_unavailable"
    # Infrastructure
    STORE_ERROR = "store_error"
    GATEWAY_EXHAUSTED = "gateway_exhausted"


class AccessGateError(Exception):
    """Base error; kind identifies the failure class, detail holds fields for logging."""

    kind: ErrorKind = ErrorKind.VALIDATION

    def __init__(self, message: str, detail: dict[str, Any] | None = None, kind: ErrorKind | None = None):
        super().__init__(message)
        self.detail = detail or {}
        if kind is not None:
            self.kind = kind

    def to_dict(self) -> dict[str, Any]:
        return {"error": self.kind.value, "message": str(self), "detail": self.detail}


class ValidationError(AccessGateError):
    """Malformed address, amount, hash or identifier. Raised before any external call."""

    kind = ErrorKind.VALIDATION


class IdentifierTooLong(ValidationError):
    kind = ErrorKind.IDENTIFIER_TOO_LONG


class NotFoundError(AccessGateError):
    """Unknown content or subscription."""

    kind = ErrorKind.NOT_FOUND


class ChainError(AccessGateError):
    """Chain-side failure. kind is one of the chain ErrorKind values."""

    kind = ErrorKind.CHAIN_UNAVAILABLE


class NetworkTimeout(ChainError):
    """RPC call exceeded its timeout. Not a definitive on-chain answer; safe to retry upstream."""

    kind = ErrorKind.NETWORK_TIMEOUT


class ChainUnavailable(ChainError):
    """RPC endpoint unreachable or returned a protocol-level error."""

    kind = ErrorKind.CHAIN_UNAVAILABLE


class StoreError(AccessGateError):
    """Durable store unreachable or returned garbage."""

    kind = ErrorKind.STORE_ERROR


class GatewayExhausted(AccessGateError):
    """Every metadata gateway failed or timed out."""

    kind = ErrorKind.GATEWAY_EXHAUSTED
