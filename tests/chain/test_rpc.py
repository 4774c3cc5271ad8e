"""Tests for JsonRpcChainReader against a mocked JSON-RPC endpoint."""
import json

import httpx
import pytest
from eth_abi import encode

from accessgate.chain import abi
from accessgate.chain.rpc import JsonRpcChainReader
from accessgate.content.ids import to_content_id
from accessgate.core.errors import ChainUnavailable, ErrorKind, NetworkTimeout

from conftest import CREATOR, PAYER, TOKEN, TX_HASH, address_topic

SETTLEMENT = "0x" + "d" * 40
CID = "Qm" + "a" * 44


def make_reader(handler):
    client = httpx.Client(transport=httpx.MockTransport(handler))
    return JsonRpcChainReader(rpc_url="https://rpc.example", settlement_address=SETTLEMENT, timeout=5.0, client=client)


def rpc_handler(results):
    """Answer each JSON-RPC method from results; callables get the params."""
    calls = []

    def handler(request):
        body = json.loads(request.content)
        calls.append(body)
        result = results[body["method"]]
        if callable(result):
            result = result(body["params"])
        return httpx.Response(200, json={"jsonrpc": "2.0", "id": body["id"], "result": result})

    handler.calls = calls
    return handler


def test_get_transaction_parses_hex_fields():
    handler = rpc_handler({
        "eth_getTransactionByHash": {
            "hash": TX_HASH,
            "from": PAYER.upper().replace("0X", "0x"),
            "to": TOKEN,
            "blockNumber": "0x64",
        },
    })

    tx = make_reader(handler).get_transaction(TX_HASH)

    assert tx.from_address == PAYER
    assert tx.to_address == TOKEN
    assert tx.block_number == 100
    assert handler.calls[0]["params"] == [TX_HASH]


def test_unknown_transaction_is_none():
    reader = make_reader(rpc_handler({"eth_getTransactionByHash": None}))

    assert reader.get_transaction(TX_HASH) is None


def test_get_receipt_parses_logs():
    value = "0x" + (1_000_000).to_bytes(32, "big").hex()
    handler = rpc_handler({
        "eth_getTransactionReceipt": {
            "transactionHash": TX_HASH,
            "status": "0x1",
            "blockNumber": "0x10",
            "gasUsed": "0xcb20",
            "logs": [{
                "address": TOKEN,
                "topics": [abi.TRANSFER_TOPIC, address_topic(PAYER), address_topic(CREATOR)],
                "data": value,
            }],
        },
    })

    receipt = make_reader(handler).get_receipt(TX_HASH)

    assert receipt.succeeded
    assert receipt.block_number == 16
    assert receipt.gas_used == 52_000
    assert abi.decode_transfer(receipt.logs[0].topics, receipt.logs[0].data) == (PAYER, CREATOR, 1_000_000)


def test_get_content_decodes_tuple():
    def eth_call(params):
        call, block = params
        assert call["to"] == SETTLEMENT
        assert call["data"].startswith("0x" + abi.GET_CONTENT_SELECTOR.hex())
        encoded = encode([abi.CONTENT_TUPLE], [(CREATOR, 2_000_000, CID, True, 1_700_000_000)])
        return "0x" + encoded.hex()

    record = make_reader(rpc_handler({"eth_call": eth_call})).get_content("article-1")

    assert record.content_id == to_content_id("article-1")
    assert record.creator == CREATOR
    assert record.price == 2_000_000
    assert record.storage_pointer == CID
    assert record.is_active is True


def test_get_content_zero_creator_is_none():
    encoded = encode([abi.CONTENT_TUPLE], [("0x" + "0" * 40, 0, "", False, 0)])
    reader = make_reader(rpc_handler({"eth_call": "0x" + encoded.hex()}))

    assert reader.get_content("missing") is None


def test_get_content_revert_is_none():
    def handler(request):
        body = json.loads(request.content)
        return httpx.Response(200, json={
            "jsonrpc": "2.0", "id": body["id"],
            "error": {"code": 3, "message": "execution reverted: Content does not exist"},
        })

    assert make_reader(handler).get_content("missing") is None


def test_check_access():
    def eth_call(params):
        assert params[0]["data"].startswith("0x" + abi.CHECK_ACCESS_SELECTOR.hex())
        return "0x" + encode(["bool"], [True]).hex()

    assert make_reader(rpc_handler({"eth_call": eth_call})).check_access(PAYER, "article-1") is True


def test_timeout_raises_network_timeout():
    def handler(request):
        raise httpx.ReadTimeout("timed out", request=request)

    with pytest.raises(NetworkTimeout) as exc:
        make_reader(handler).get_transaction(TX_HASH)

    assert exc.value.kind == ErrorKind.NETWORK_TIMEOUT


def test_rpc_error_raises_chain_unavailable():
    def handler(request):
        body = json.loads(request.content)
        return httpx.Response(200, json={
            "jsonrpc": "2.0", "id": body["id"], "error": {"code": -32000, "message": "header not found"},
        })

    with pytest.raises(ChainUnavailable) as exc:
        make_reader(handler).get_receipt(TX_HASH)

    assert exc.value.detail["code"] == -32000


def test_http_error_raises_chain_unavailable():
    reader = make_reader(lambda request: httpx.Response(503, text="busy"))

    with pytest.raises(ChainUnavailable):
        reader.get_transaction(TX_HASH)


@pytest.mark.parametrize("result", ["0x1234", "0x" + "ff" * 31])
def test_malformed_get_content_data_raises_chain_unavailable(result):
    reader = make_reader(rpc_handler({"eth_call": result}))

    with pytest.raises(ChainUnavailable) as exc:
        reader.get_content("article-1")

    assert exc.value.detail["method"] == "eth_call"
    assert exc.value.kind == ErrorKind.CHAIN_UNAVAILABLE


@pytest.mark.parametrize("result", ["0x12", None])
def test_malformed_check_access_data_raises_chain_unavailable(result):
    reader = make_reader(rpc_handler({"eth_call": result}))

    with pytest.raises(ChainUnavailable):
        reader.check_access(PAYER, "article-1")


@pytest.mark.parametrize("reply", [[], None, "ok"])
def test_non_object_reply_raises_chain_unavailable(reply):
    reader = make_reader(lambda request: httpx.Response(200, json=reply))

    with pytest.raises(ChainUnavailable):
        reader.get_transaction(TX_HASH)
