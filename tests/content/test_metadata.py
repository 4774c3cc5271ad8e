"""Tests for MetadataResolver gateway fallback."""
import httpx
import pytest

from accessgate.content.metadata import MetadataResolver, is_valid_cid
from accessgate.core.errors import ErrorKind, GatewayExhausted, ValidationError

CID = "Qm" + "a" * 44
GATEWAYS = [
    "https://one.example/ipfs/{cid}",
    "https://two.example/ipfs/{cid}",
    "https://three.example/ipfs/{cid}",
]

DESCRIPTOR = {
    "originalContentId": "article-1",
    "creator": "0x" + "a" * 40,
    "price": "1.00",
    "createdAt": "2025-01-01T00:00:00Z",
    "contentType": "text",
    "encryptedPayload": {"ciphertext": "deadbeef", "iv": "00"},
    "encryptionKeyMaterialHash": "0x" + "e" * 64,
    "title": "Hello",
}


def make_resolver(handler):
    client = httpx.Client(transport=httpx.MockTransport(handler))
    return MetadataResolver(gateways=GATEWAYS, timeout=10.0, client=client)


def test_first_success_wins():
    seen = []

    def handler(request):
        seen.append(request.url.host)
        return httpx.Response(200, json=DESCRIPTOR)

    descriptor = make_resolver(handler).resolve(CID)

    assert seen == ["one.example"]
    assert descriptor.original_content_id == "article-1"
    assert descriptor.encryption_key_material_hash == "0x" + "e" * 64
    assert descriptor.model_extra["title"] == "Hello"


def test_falls_through_errors_in_order():
    seen = []

    def handler(request):
        seen.append(request.url.host)
        if request.url.host == "one.example":
            raise httpx.ReadTimeout("timed out", request=request)
        if request.url.host == "two.example":
            return httpx.Response(502, text="bad gateway")
        return httpx.Response(200, json=DESCRIPTOR)

    descriptor = make_resolver(handler).resolve(CID)

    assert seen == ["one.example", "two.example", "three.example"]
    assert descriptor.creator == "0x" + "a" * 40


def test_invalid_document_skips_gateway():
    def handler(request):
        if request.url.host == "one.example":
            return httpx.Response(200, text="<html>not json</html>")
        if request.url.host == "two.example":
            return httpx.Response(200, json={"creator": "0x"})
        return httpx.Response(200, json=DESCRIPTOR)

    assert make_resolver(handler).resolve(CID).price == "1.00"


def test_all_gateways_failing_raises():
    def handler(request):
        raise httpx.ConnectError("refused", request=request)

    with pytest.raises(GatewayExhausted) as exc:
        make_resolver(handler).resolve(CID)

    assert exc.value.kind == ErrorKind.GATEWAY_EXHAUSTED
    assert len(exc.value.detail["attempts"]) == 3


def test_invalid_cid_rejected_without_fetching():
    def handler(request):
        raise AssertionError("gateway must not be called")

    with pytest.raises(ValidationError):
        make_resolver(handler).resolve("not-a-cid")


def test_cid_formats():
    assert is_valid_cid(CID)
    assert is_valid_cid("b" + "a" * 58)
    assert not is_valid_cid("Qm" + "0" * 44)
    assert not is_valid_cid("")
