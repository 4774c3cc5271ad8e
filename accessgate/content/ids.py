"""
Content identifier canonicalization.

The settlement contract keys content by bytes32. Callers may pass either a
ready 0x-prefixed 32-byte hex word or a human-readable string; strings are
UTF-8 encoded into the start of the word and zero-padded, keeping the last
byte free (max 31 bytes). Longer strings are rejected, never truncated.
"""
from __future__ import annotations

import re

from accessgate.core.errors import IdentifierTooLong, ValidationError

WORD_SIZE = 32
MAX_STRING_BYTES = WORD_SIZE - 1

_HEX_WORD_RE = re.compile(r"^0x[0-9a-fA-F]{64}$")
_ADDRESS_RE = re.compile(r"^0x[0-9a-fA-F]{40}$")
_TX_HASH_RE = re.compile(r"^0x[0-9a-fA-F]{64}$")


def is_content_id_word(value: str) -> bool:
    return bool(_HEX_WORD_RE.match(value))


def to_content_id(value: str) -> str:
    """Canonical 0x-prefixed lowercase bytes32 hex for a content identifier.

    Strings must not contain NUL: trailing NULs are indistinguishable from
    padding, so "a" and "a" plus a NUL would name the same word.
    """
    if not isinstance(value, str) or not value:
        raise ValidationError("Content identifier must be a non-empty string")
    if is_content_id_word(value):
        return value.lower()
    if "\x00" in value:
        raise ValidationError("Content identifier must not contain NUL characters")
    raw = value.encode("utf-8")
    if len(raw) > MAX_STRING_BYTES:
        raise IdentifierTooLong(
            "Content identifier exceeds 31 bytes",
            detail={"length": len(raw), "max": MAX_STRING_BYTES},
        )
    return "0x" + raw.ljust(WORD_SIZE, b"\x00").hex()


def from_content_id(word: str) -> str:
    """Decode a bytes32 word produced by to_content_id back to its string."""
    if not is_content_id_word(word):
        raise ValidationError("Not a bytes32 hex word", detail={"value": word})
    raw = bytes.fromhex(word[2:])
    if raw[MAX_STRING_BYTES] != 0:
        raise ValidationError("Word is not a null-terminated string", detail={"value": word})
    try:
        return raw.rstrip(b"\x00").decode("utf-8")
    except UnicodeDecodeError as e:
        raise ValidationError("Word does not hold UTF-8 text", detail={"value": word}) from e


def to_content_id_bytes(value: str) -> bytes:
    return bytes.fromhex(to_content_id(value)[2:])


def normalize_address(address: str) -> str:
    """Lowercased 0x address; raises ValidationError on malformed input."""
    if not isinstance(address, str) or not _ADDRESS_RE.match(address):
        raise ValidationError("Malformed address", detail={"address": address})
    return address.lower()


def normalize_tx_hash(tx_hash: str) -> str:
    if not isinstance(tx_hash, str) or not _TX_HASH_RE.match(tx_hash):
        raise ValidationError("Malformed transaction hash", detail={"tx_hash": tx_hash})
    return tx_hash.lower()
