import asyncio
import logging

import pytest

from conftest import WALLET, FakeSwapClient
from oneinch_connector import TransactionGenerator
from wallet_connector_base import (
    NATIVE_TOKEN_ADDRESS,
    SwapAPIError,
    SwapInstruction,
    TransactionGenerationError,
)

USDC = "0x833589fcd6edb6e08f4c7c32d4f71b54bda02913"
WETH = "0x4200000000000000000000000000000000000006"


def instruction(from_token, to_token, amount_in_wei, amount_usd=10.0):
    return SwapInstruction(
        from_token=from_token,
        to_token=to_token,
        from_symbol=from_token[-4:],
        to_symbol=to_token[-4:],
        amount_in_wei=amount_in_wei,
        amount_usd=amount_usd,
    )


def test_approval_precedes_each_swap(config):
    swap_client = FakeSwapClient()
    generator = TransactionGenerator(swap_client, config=config)
    swaps = [instruction(USDC, WETH, "1000000"), instruction(WETH, USDC, "5000")]

    transactions = asyncio.run(generator.generate(swaps, WALLET))

    assert [tx.type for tx in transactions] == ["approval", "swap", "approval", "swap"]
    assert [tx.to for tx in transactions[::2]] == [USDC, WETH]
    assert swap_client.approval_calls == [(USDC, "1000000"), (WETH, "5000")]
    assert [call[:3] for call in swap_client.swap_calls] == [(USDC, WETH, "1000000"), (WETH, USDC, "5000")]
    assert all(call[3] == WALLET for call in swap_client.swap_calls)


def test_native_sell_has_no_approval(config):
    swap_client = FakeSwapClient()
    generator = TransactionGenerator(swap_client, config=config)
    native = NATIVE_TOKEN_ADDRESS.upper().replace("0X", "0x")
    swaps = [instruction(native, USDC, "250000000000000000"), instruction(USDC, WETH, "7")]

    transactions = asyncio.run(generator.generate(swaps, WALLET))

    assert [tx.type for tx in transactions] == ["swap", "approval", "swap"]
    assert swap_client.approval_calls == [(USDC, "7")]
    assert transactions[0].value == "250000000000000000"


def test_collaborator_failure_propagates(config, caplog):
    caplog.set_level(logging.DEBUG)
    swap_client = FakeSwapClient(fail_on_swap=2)
    generator = TransactionGenerator(swap_client, config=config)
    swaps = [instruction(USDC, WETH, "1"), instruction(WETH, USDC, "2"), instruction(USDC, WETH, "3")]

    with pytest.raises(SwapAPIError):
        asyncio.run(generator.generate(swaps, WALLET))

    # Nothing after the failing instruction is requested
    assert len(swap_client.swap_calls) == 2
    assert len(swap_client.approval_calls) == 2
    assert any(getattr(r, "event", None) == "transaction_generation_failed" for r in caplog.records)


def test_missing_wallet_address(config):
    swap_client = FakeSwapClient()
    generator = TransactionGenerator(swap_client, config=config)

    with pytest.raises(TransactionGenerationError):
        asyncio.run(generator.generate([instruction(USDC, WETH, "1")], ""))
    assert swap_client.call_count == 0


def test_generation_events(config, caplog):
    caplog.set_level(logging.DEBUG)
    generator = TransactionGenerator(FakeSwapClient(), config=config)
    swaps = [instruction(NATIVE_TOKEN_ADDRESS, USDC, "1"), instruction(USDC, WETH, "2")]

    asyncio.run(generator.generate(swaps, WALLET))

    events = [getattr(r, "event", None) for r in caplog.records]
    assert events.count("approval_skipped") == 1
    assert events.count("approval_added") == 1
    assert events.count("swap_added") == 2
    assert events[-1] == "transactions_generated"
