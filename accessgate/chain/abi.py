"""
ABI fragments for the settlement contract and the ERC-20 Transfer event.
"""
from __future__ import annotations

from eth_abi import decode, encode
from eth_abi.exceptions import DecodingError
from eth_utils import event_signature_to_log_topic, function_signature_to_4byte_selector

CHECK_ACCESS_SIGNATURE = "checkAccess(address,bytes32)"
GET_CONTENT_SIGNATURE = "getContent(bytes32)"
TRANSFER_EVENT_SIGNATURE = "Transfer(address,address,uint256)"

CHECK_ACCESS_SELECTOR = function_signature_to_4byte_selector(CHECK_ACCESS_SIGNATURE)
GET_CONTENT_SELECTOR = function_signature_to_4byte_selector(GET_CONTENT_SIGNATURE)
TRANSFER_TOPIC = "0x" + event_signature_to_log_topic(TRANSFER_EVENT_SIGNATURE).hex()

CONTENT_TUPLE = "(address,uint256,string,bool,uint256)"


def _hex(data: bytes) -> str:
    return "0x" + data.hex()


def _unhex(value: str) -> bytes:
    return bytes.fromhex(value[2:] if value.startswith("0x") else value)


def encode_check_access(identity: str, content_id: bytes) -> str:
    return _hex(CHECK_ACCESS_SELECTOR + encode(["address", "bytes32"], [identity, content_id]))


def encode_get_content(content_id: bytes) -> str:
    return _hex(GET_CONTENT_SELECTOR + encode(["bytes32"], [content_id]))


def decode_bool(result: str) -> bool:
    (value,) = decode(["bool"], _unhex(result))
    return bool(value)


def decode_content(result: str) -> tuple[str, int, str, bool, int]:
    """(creator, price, ipfs_cid, is_active, created_at) from getContent return data."""
    ((creator, price, cid, is_active, created_at),) = decode([CONTENT_TUPLE], _unhex(result))
    return creator.lower(), int(price), cid, bool(is_active), int(created_at)


def topic_to_address(topic: str) -> str:
    """Indexed address topic (32-byte word) -> lowercased 0x address."""
    return "0x" + topic[-40:].lower()


def decode_transfer(topics: list[str], data: str) -> tuple[str, str, int] | None:
    """(from, to, value) for a Transfer log; None if the log is not a well-formed Transfer."""
    if len(topics) != 3 or topics[0].lower() != TRANSFER_TOPIC:
        return None
    try:
        (value,) = decode(["uint256"], _unhex(data))
    except (DecodingError, ValueError):
        return None
    return topic_to_address(topics[1]), topic_to_address(topics[2]), int(value)
