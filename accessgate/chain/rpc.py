"""
JSON-RPC chain reader using httpx sync client.
Bounded per-request timeout; timeouts are reported as NetworkTimeout and are
never retried here.
"""
import itertools
import logging
import time
from typing import Any

import httpx
from eth_abi.exceptions import DecodingError

from accessgate.chain import abi
from accessgate.chain.reader import ChainReader, ContentRecord, LogEntry, Receipt, Transaction
from accessgate.content.ids import to_content_id_bytes
from accessgate.core.config import settings
from accessgate.core.errors import ChainUnavailable, NetworkTimeout
from accessgate.utils.metrics import rpc_request_duration_seconds, rpc_requests_total

logger = logging.getLogger(__name__)


def _int(value: str | int | None) -> int | None:
    if value is None:
        return None
    if isinstance(value, int):
        return value
    return int(value, 16)


class JsonRpcChainReader(ChainReader):
    def __init__(
        self,
        rpc_url: str | None = None,
        settlement_address: str | None = None,
        timeout: float | None = None,
        client: httpx.Client | None = None,
    ) -> None:
        self._rpc_url = rpc_url or settings.rpc_url
        self._settlement = (settlement_address or settings.settlement_contract_address).lower()
        self._timeout = timeout if timeout is not None else settings.rpc_timeout
        self._client = client
        self._ids = itertools.count(1)

    @property
    def client(self) -> httpx.Client:
        """Lazy initialization of httpx client."""
        if self._client is None:
            self._client = httpx.Client(timeout=self._timeout)
        return self._client

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None

    def _record(self, method: str, status: str, started: float) -> None:
        rpc_requests_total.labels(method=method, status=status).inc()
        rpc_request_duration_seconds.labels(method=method).observe(time.time() - started)

    def _rpc(self, method: str, params: list[Any]) -> Any:
        payload = {"jsonrpc": "2.0", "id": next(self._ids), "method": method, "params": params}
        start = time.time()
        try:
            resp = self.client.post(self._rpc_url, json=payload, timeout=self._timeout)
            resp.raise_for_status()
            body = resp.json()
        except httpx.TimeoutException as e:
            self._record(method, "timeout", start)
            logger.warning("rpc_timeout", extra={"rpc_method": method, "error": str(e)})
            raise NetworkTimeout(f"RPC {method} timed out", detail={"method": method}) from e
        except httpx.HTTPError as e:
            self._record(method, "error", start)
            logger.warning("rpc_transport_error", extra={"rpc_method": method, "error": str(e)})
            raise ChainUnavailable(f"RPC {method} failed", detail={"method": method, "error": str(e)}) from e
        except ValueError as e:
            self._record(method, "error", start)
            raise ChainUnavailable(f"RPC {method} returned invalid JSON", detail={"method": method}) from e

        if not isinstance(body, dict):
            self._record(method, "error", start)
            raise ChainUnavailable(f"RPC {method} returned a non-object reply", detail={"method": method})
        if body.get("error"):
            self._record(method, "rpc_error", start)
            error = body["error"]
            raise ChainUnavailable(
                f"RPC {method} error: {error.get('message', 'unknown')}",
                detail={"method": method, "code": error.get("code"), "message": error.get("message")},
            )
        self._record(method, "success", start)
        return body.get("result")

    def get_transaction(self, tx_hash: str) -> Transaction | None:
        result = self._rpc("eth_getTransactionByHash", [tx_hash])
        if not result:
            return None
        return Transaction(
            hash=result["hash"].lower(),
            from_address=result["from"].lower(),
            to_address=result["to"].lower() if result.get("to") else None,
            block_number=_int(result.get("blockNumber")),
        )

    def get_receipt(self, tx_hash: str) -> Receipt | None:
        result = self._rpc("eth_getTransactionReceipt", [tx_hash])
        if not result:
            return None
        return Receipt(
            transaction_hash=result["transactionHash"].lower(),
            status=_int(result.get("status")) or 0,
            block_number=_int(result.get("blockNumber")) or 0,
            gas_used=_int(result.get("gasUsed")) or 0,
            logs=[
                LogEntry(
                    address=log["address"].lower(),
                    topics=[t.lower() for t in log.get("topics", [])],
                    data=log.get("data", "0x"),
                )
                for log in result.get("logs", [])
            ],
        )

    def _call(self, data: str) -> str:
        return self._rpc("eth_call", [{"to": self._settlement, "data": data}, "latest"])

    def _decode(self, decoder, result: Any, function: str):
        try:
            if not isinstance(result, str):
                raise ValueError(f"expected hex string, got {type(result).__name__}")
            return decoder(result)
        except (DecodingError, ValueError) as e:
            logger.warning("rpc_decode_failed", extra={"rpc_method": "eth_call", "error": str(e)})
            raise ChainUnavailable(
                f"Malformed {function} return data",
                detail={"method": "eth_call", "function": function, "error": str(e)},
            ) from e

    def get_content(self, content_id: str) -> ContentRecord | None:
        word = to_content_id_bytes(content_id)
        try:
            result = self._call(abi.encode_get_content(word))
        except ChainUnavailable as e:
            # Contracts that require() on unknown ids revert instead of returning zeros
            if "revert" in str(e.detail.get("message") or "").lower():
                return None
            raise
        if not result or result == "0x":
            return None
        creator, price, cid, is_active, created_at = self._decode(abi.decode_content, result, "getContent")
        record = ContentRecord(
            content_id="0x" + word.hex(),
            creator=creator,
            price=price,
            storage_pointer=cid,
            is_active=is_active,
            created_at=created_at,
        )
        return record if record.exists else None

    def check_access(self, identity: str, content_id: str) -> bool:
        word = to_content_id_bytes(content_id)
        result = self._call(abi.encode_check_access(identity.lower(), word))
        return self._decode(abi.decode_bool, result, "checkAccess")
