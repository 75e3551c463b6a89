import asyncio

import pytest

from conftest import RecordingTransactionClient
from wallet_clients import (
    build_transfer_transaction,
    encode_approve_call,
    encode_transfer_call,
    format_currency,
    get_tokens_with_balance,
    parse_units,
    send_token,
    send_token_with_approval,
    validate_send_amount,
)
from wallet_connector_base import NATIVE_TOKEN_ADDRESS, PortfolioToken

USDC = "0x833589fCD6eDb6E08f4c7C32D4f71b54bdA02913"
RECIPIENT = "0x2222222222222222222222222222222222222222"


def test_parse_units():
    assert parse_units("1.5", 6) == 1_500_000
    assert parse_units("0.000001", 6) == 1
    assert parse_units("2", 18) == 2 * 10 ** 18
    with pytest.raises(ValueError):
        parse_units("abc", 6)


def test_encode_transfer_call():
    data = encode_transfer_call(RECIPIENT, 1_500_000)

    assert data.startswith("0xa9059cbb")
    assert data[10:74] == "0" * 24 + "22" * 20
    assert int(data[74:], 16) == 1_500_000


def test_encode_approve_call():
    data = encode_approve_call(RECIPIENT, 5)

    assert data.startswith("0x095ea7b3")
    assert len(data) == 2 + 8 + 128


def test_encode_rejects_bad_address():
    with pytest.raises(ValueError, match="Invalid address"):
        encode_transfer_call("0x1234", 1)


def test_erc20_transfer_transaction():
    tx = build_transfer_transaction(USDC, RECIPIENT, "2.5", 6)

    assert tx.type == "transfer"
    assert tx.to == USDC
    assert tx.value == "0"
    assert int(tx.data[74:], 16) == 2_500_000


def test_native_transfer_transaction():
    tx = build_transfer_transaction(NATIVE_TOKEN_ADDRESS, RECIPIENT, "0.01", 18)

    assert tx.to.lower() == RECIPIENT
    assert tx.value == str(10 ** 16)
    assert tx.data == "0x"


def test_validate_send_amount():
    assert validate_send_amount("1", 2.0).is_valid
    assert validate_send_amount("two", 2.0).error == "Invalid amount format"
    assert validate_send_amount("0", 2.0).error == "Amount must be greater than 0"
    assert validate_send_amount("2.5", 2.0).error == "Amount exceeds available balance"


def test_tokens_with_balance():
    tokens = [
        PortfolioToken(name="A", address=USDC, symbol="A", decimals=6, value_usd=1.0, amount=1.0),
        PortfolioToken(name="B", address=RECIPIENT, symbol="B", decimals=6, value_usd=0.0, amount=0.0),
    ]
    assert [t.symbol for t in get_tokens_with_balance(tokens)] == ["A"]


def test_format_currency():
    assert format_currency(1234.5) == "$1,234.50"
    assert format_currency(0) == "$0.00"
    assert format_currency(-3.456) == "-$3.46"


def test_send_token_submits_single_transfer():
    client = RecordingTransactionClient()

    result = asyncio.run(send_token(client, USDC, RECIPIENT, "1", 6, available_balance=10.0))

    assert result.success
    assert result.transaction_count == 1
    assert [tx.type for tx in client.batches[0]] == ["transfer"]


def test_send_token_rejects_before_submitting():
    client = RecordingTransactionClient()

    over = asyncio.run(send_token(client, USDC, RECIPIENT, "11", 6, available_balance=10.0))
    bad_recipient = asyncio.run(send_token(client, USDC, "not-an-address", "1", 6))

    assert over.error == "Amount exceeds available balance"
    assert "Invalid address" in bad_recipient.error
    assert client.batches == []


SPENDER = "0x3333333333333333333333333333333333333333"


def test_send_token_with_approval_batches_approve_then_transfer():
    client = RecordingTransactionClient()

    result = asyncio.run(send_token_with_approval(client, USDC, RECIPIENT, SPENDER, "1.5", 6))

    assert result.success
    assert result.transaction_count == 2
    approve, transfer = client.batches[0]
    assert [approve.type, transfer.type] == ["approval", "transfer"]
    assert approve.to == transfer.to == USDC
    assert approve.data.startswith("0x095ea7b3")
    assert approve.data[10:74] == "0" * 24 + "33" * 20
    assert transfer.data.startswith("0xa9059cbb")
    assert transfer.data[10:74] == "0" * 24 + "22" * 20
    assert int(approve.data[74:], 16) == int(transfer.data[74:], 16) == 1_500_000


def test_send_token_with_approval_rejects_before_submitting():
    client = RecordingTransactionClient()

    native = asyncio.run(send_token_with_approval(client, NATIVE_TOKEN_ADDRESS, RECIPIENT, SPENDER, "1", 18))
    bad_spender = asyncio.run(send_token_with_approval(client, USDC, RECIPIENT, "0x1234", "1", 6))
    zero = asyncio.run(send_token_with_approval(client, USDC, RECIPIENT, SPENDER, "0", 6))

    assert native.error == "Native asset cannot be approved"
    assert "Invalid address" in bad_spender.error
    assert zero.error == "Amount must be greater than 0"
    assert client.batches == []
