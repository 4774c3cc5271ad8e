"""
Durable key-value capability shared by the payment and subscription ledgers.

Values are JSON documents. The store has no TTL: every expiry is computed by
the ledgers at read time.
"""
import json
import logging
from abc import ABC, abstractmethod
from typing import Any, Callable, Iterator

import redis

from accessgate.core.config import settings
from accessgate.core.errors import StoreError

logger = logging.getLogger(__name__)

Predicate = Callable[[str, Any], bool]


class KVStore(ABC):
    @abstractmethod
    def get(self, key: str) -> Any | None:
        raise NotImplementedError

    @abstractmethod
    def set(self, key: str, value: Any) -> None:
        raise NotImplementedError

    @abstractmethod
    def delete(self, key: str) -> None:
        raise NotImplementedError

    @abstractmethod
    def scan(self, prefix: str, predicate: Predicate | None = None) -> Iterator[tuple[str, Any]]:
        """Yield (key, value) for keys starting with prefix, filtered by predicate."""
        raise NotImplementedError

    def ping(self) -> bool:
        return True


class RedisStore(KVStore):
    """Redis-backed store; every redis failure surfaces as StoreError."""

    def __init__(self, client: redis.Redis | None = None, key_prefix: str | None = None) -> None:
        self.client = client or redis.Redis.from_url(settings.redis_url, decode_responses=True)
        self.key_prefix = settings.store_key_prefix if key_prefix is None else key_prefix

    def _key(self, key: str) -> str:
        return f"{self.key_prefix}{key}"

    def _decode(self, key: str, raw: str | None) -> Any | None:
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except ValueError as e:
            raise StoreError(f"Corrupt value at {key}", detail={"error": str(e)}) from e

    def get(self, key: str) -> Any | None:
        try:
            raw = self.client.get(self._key(key))
        except redis.RedisError as e:
            logger.error("store_get_failed", extra={"error": str(e)})
            raise StoreError("Store unavailable", detail={"op": "get", "error": str(e)}) from e
        return self._decode(key, raw)

    def set(self, key: str, value: Any) -> None:
        try:
            self.client.set(self._key(key), json.dumps(value, default=str))
        except redis.RedisError as e:
            logger.error("store_set_failed", extra={"error": str(e)})
            raise StoreError("Store unavailable", detail={"op": "set", "error": str(e)}) from e

    def delete(self, key: str) -> None:
        try:
            self.client.delete(self._key(key))
        except redis.RedisError as e:
            raise StoreError("Store unavailable", detail={"op": "delete", "error": str(e)}) from e

    def scan(self, prefix: str, predicate: Predicate | None = None) -> Iterator[tuple[str, Any]]:
        strip = len(self.key_prefix)
        try:
            keys = list(self.client.scan_iter(match=f"{self._key(prefix)}*"))
        except redis.RedisError as e:
            raise StoreError("Store unavailable", detail={"op": "scan", "error": str(e)}) from e
        for full_key in sorted(keys):
            key = full_key[strip:]
            value = self.get(key)
            if value is None:
                continue
            if predicate is None or predicate(key, value):
                yield key, value

    def ping(self) -> bool:
        try:
            return bool(self.client.ping())
        except redis.RedisError as e:
            raise StoreError("Store unavailable", detail={"op": "ping", "error": str(e)}) from e


class MemoryStore(KVStore):
    """
    Process-local store for development and tests.
    Values round-trip through JSON so callers see the same shapes as with Redis.
    """

    def __init__(self) -> None:
        self._data: dict[str, str] = {}

    def get(self, key: str) -> Any | None:
        raw = self._data.get(key)
        return json.loads(raw) if raw is not None else None

    def set(self, key: str, value: Any) -> None:
        self._data[key] = json.dumps(value, default=str)

    def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def scan(self, prefix: str, predicate: Predicate | None = None) -> Iterator[tuple[str, Any]]:
        for key in sorted(self._data):
            if not key.startswith(prefix):
                continue
            value = self.get(key)
            if predicate is None or predicate(key, value):
                yield key, value


def build_store() -> KVStore:
    """Store selected by settings.store_backend."""
    if settings.store_backend == "memory":
        logger.warning("store_backend_memory", extra={"reason": "non-durable store configured"})
        return MemoryStore()
    return RedisStore()
