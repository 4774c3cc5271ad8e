"""
Content descriptor lookup over IPFS gateways.

Gateways are tried once each, in the configured order, with a fixed timeout
per attempt. The first response that parses as a descriptor wins. No retry,
no backoff: when all fail the caller gets GatewayExhausted and decides.
"""
from __future__ import annotations

import logging
import re
from typing import Any

import httpx
from pydantic import BaseModel, ConfigDict, Field, ValidationError as PydanticValidationError

from accessgate.core.config import settings
from accessgate.core.errors import GatewayExhausted, ValidationError
from accessgate.utils.metrics import gateway_fetches_total

logger = logging.getLogger(__name__)

_CID_V0_RE = re.compile(r"^Qm[1-9A-HJ-NP-Za-km-z]{44}$")
_CID_V1_RE = re.compile(r"^b[a-z2-7]{58}$")


def is_valid_cid(cid: str) -> bool:
    """CIDv0 (Qm + 44 base58) or base32 CIDv1 (b + 58)."""
    return bool(_CID_V0_RE.match(cid) or _CID_V1_RE.match(cid))


class ContentDescriptor(BaseModel):
    """Off-chain JSON document with presentation metadata and decryption material."""

    original_content_id: str = Field(..., alias="originalContentId")
    creator: str
    price: str | int | float
    created_at: str | int = Field(..., alias="createdAt")
    content_type: str = Field("text", alias="contentType")
    encrypted_payload: Any = Field(..., alias="encryptedPayload")
    encryption_key_material_hash: str = Field(..., alias="encryptionKeyMaterialHash")

    model_config = ConfigDict(populate_by_name=True, extra="allow", frozen=True)


class MetadataResolver:
    def __init__(
        self,
        gateways: list[str] | None = None,
        timeout: float | None = None,
        client: httpx.Client | None = None,
    ) -> None:
        self.gateways = gateways if gateways is not None else settings.ipfs_gateway_list
        self.timeout = timeout if timeout is not None else settings.ipfs_gateway_timeout
        self._client = client

    @property
    def client(self) -> httpx.Client:
        if self._client is None:
            self._client = httpx.Client(timeout=self.timeout, follow_redirects=True)
        return self._client

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None

    def resolve(self, cid: str) -> ContentDescriptor:
        if not is_valid_cid(cid):
            raise ValidationError("Invalid CID format", detail={"cid": cid})

        failures: list[dict[str, str]] = []
        for template in self.gateways:
            url = template.format(cid=cid)
            descriptor = self._try_gateway(url, cid, failures)
            if descriptor is not None:
                return descriptor

        logger.error("metadata_gateways_exhausted", extra={"cid": cid})
        raise GatewayExhausted(
            "All metadata gateways failed",
            detail={"cid": cid, "attempts": failures},
        )

    def _try_gateway(self, url: str, cid: str, failures: list[dict[str, str]]) -> ContentDescriptor | None:
        try:
            resp = self.client.get(url, headers={"Accept": "application/json"}, timeout=self.timeout)
        except httpx.TimeoutException:
            gateway_fetches_total.labels(status="timeout").inc()
            logger.info("metadata_gateway_timeout", extra={"gateway": url, "cid": cid})
            failures.append({"gateway": url, "error": "timeout"})
            return None
        except httpx.HTTPError as e:
            gateway_fetches_total.labels(status="http_error").inc()
            logger.info("metadata_gateway_failed", extra={"gateway": url, "cid": cid, "error": str(e)})
            failures.append({"gateway": url, "error": type(e).__name__})
            return None

        if not resp.is_success:
            gateway_fetches_total.labels(status="http_error").inc()
            logger.info("metadata_gateway_status", extra={"gateway": url, "cid": cid, "status_code": resp.status_code})
            failures.append({"gateway": url, "error": f"status {resp.status_code}"})
            return None

        try:
            descriptor = ContentDescriptor.model_validate(resp.json())
        except (ValueError, PydanticValidationError) as e:
            gateway_fetches_total.labels(status="invalid").inc()
            logger.info("metadata_gateway_invalid", extra={"gateway": url, "cid": cid, "error": str(e)})
            failures.append({"gateway": url, "error": "invalid document"})
            return None

        gateway_fetches_total.labels(status="success").inc()
        logger.info("metadata_gateway_success", extra={"gateway": url, "cid": cid})
        return descriptor
