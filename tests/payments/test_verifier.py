"""Tests for PaymentVerifier: exact amount, sender/recipient match, failure kinds."""
import pytest

from accessgate.core.errors import ErrorKind, NetworkTimeout, ValidationError
from accessgate.payments.verifier import PaymentVerifier

from conftest import CREATOR, OTHER, PAYER, TOKEN, TX_HASH, transfer_log


@pytest.fixture
def verifier(chain):
    return PaymentVerifier(chain, token_address=TOKEN, decimals=6)


def test_verified_transfer(chain, verifier):
    chain.add_payment(TX_HASH, [transfer_log(PAYER, CREATOR, 1_000_000)])

    result = verifier.verify(TX_HASH, CREATOR, "1.00", PAYER)

    assert result.verified is True
    assert result.failure is None
    assert result.value == 1_000_000
    assert result.block_number == 100
    assert result.gas_used == 52_000


def test_addresses_compared_case_insensitively(chain, verifier):
    chain.add_payment(TX_HASH, [transfer_log(PAYER, CREATOR, 250_000)])

    result = verifier.verify(TX_HASH, CREATOR.upper().replace("0X", "0x"), "0.25", PAYER)

    assert result.verified is True


def test_transaction_not_found(verifier):
    result = verifier.verify(TX_HASH, CREATOR, "1", PAYER)

    assert result.verified is False
    assert result.failure == ErrorKind.TRANSACTION_NOT_FOUND


def test_missing_receipt_is_not_found(chain, verifier):
    chain.add_payment(TX_HASH, [transfer_log(PAYER, CREATOR, 1_000_000)])
    del chain.receipts[TX_HASH]

    result = verifier.verify(TX_HASH, CREATOR, "1", PAYER)

    assert result.failure == ErrorKind.TRANSACTION_NOT_FOUND


def test_reverted_transaction_never_verifies(chain, verifier):
    chain.add_payment(TX_HASH, [transfer_log(PAYER, CREATOR, 1_000_000)], status=0)

    result = verifier.verify(TX_HASH, CREATOR, "1", PAYER)

    assert result.verified is False
    assert result.failure == ErrorKind.TRANSACTION_FAILED


def test_wrong_asset(chain, verifier):
    chain.add_payment(TX_HASH, [transfer_log(PAYER, CREATOR, 1_000_000)], to=OTHER)

    result = verifier.verify(TX_HASH, CREATOR, "1", PAYER)

    assert result.failure == ErrorKind.WRONG_ASSET


def test_transfer_to_someone_else(chain, verifier):
    chain.add_payment(TX_HASH, [transfer_log(PAYER, OTHER, 1_000_000)])

    result = verifier.verify(TX_HASH, CREATOR, "1", PAYER)

    assert result.failure == ErrorKind.NO_MATCHING_TRANSFER


def test_transfer_from_someone_else(chain, verifier):
    chain.add_payment(TX_HASH, [transfer_log(OTHER, CREATOR, 1_000_000)])

    result = verifier.verify(TX_HASH, CREATOR, "1", PAYER)

    assert result.failure == ErrorKind.NO_MATCHING_TRANSFER


def test_logs_from_other_contracts_ignored(chain, verifier):
    chain.add_payment(TX_HASH, [transfer_log(PAYER, CREATOR, 1_000_000, token=OTHER)])

    result = verifier.verify(TX_HASH, CREATOR, "1", PAYER)

    assert result.failure == ErrorKind.NO_MATCHING_TRANSFER


def test_matching_transfer_found_among_several_logs(chain, verifier):
    chain.add_payment(TX_HASH, [
        transfer_log(PAYER, OTHER, 5),
        transfer_log(PAYER, CREATOR, 2_500_000),
    ])

    result = verifier.verify(TX_HASH, CREATOR, "2.5", PAYER)

    assert result.verified is True
    assert result.value == 2_500_000


@pytest.mark.parametrize("actual", [999_999, 1_000_001])
def test_amount_must_match_exactly(chain, verifier, actual):
    chain.add_payment(TX_HASH, [transfer_log(PAYER, CREATOR, actual)])

    result = verifier.verify(TX_HASH, CREATOR, "1.00", PAYER)

    assert result.verified is False
    assert result.failure == ErrorKind.AMOUNT_MISMATCH
    assert result.value == actual
    assert result.expected_value == 1_000_000


def test_timeout_is_reported_as_network_timeout(chain, verifier):
    chain.error = NetworkTimeout("RPC eth_getTransactionByHash timed out")

    result = verifier.verify(TX_HASH, CREATOR, "1", PAYER)

    assert result.verified is False
    assert result.failure == ErrorKind.NETWORK_TIMEOUT


@pytest.mark.parametrize(
    "tx_hash, recipient, amount, sender",
    [
        ("0x1234", CREATOR, "1", PAYER),
        (TX_HASH, "0xnotanaddress", "1", PAYER),
        (TX_HASH, CREATOR, "1.0000001", PAYER),
        (TX_HASH, CREATOR, "-1", PAYER),
        (TX_HASH, CREATOR, "abc", PAYER),
    ],
)
def test_malformed_input_rejected_before_chain_call(chain, verifier, tx_hash, recipient, amount, sender):
    chain.error = AssertionError("chain must not be called")

    with pytest.raises(ValidationError):
        verifier.verify(tx_hash, recipient, amount, sender)
