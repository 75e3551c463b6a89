from __future__ import annotations

from typing import List

import pytest

from app_config import AppConfig, reset_config
from wallet_connector_base import (
    NATIVE_TOKEN_ADDRESS,
    PortfolioTokenWithTarget,
    RebalanceResult,
    SwapAPIError,
    Transaction,
    TransactionClient,
)

WALLET = "0x1111111111111111111111111111111111111111"
ROUTER = "0x111111125421ca6dc452d289314280a0f8842a65"


def make_token(symbol, value_usd, target_value_usd, amount=None, decimals=6, address=None):
    amount = value_usd if amount is None else amount
    price = value_usd / amount if amount else 0.0
    return PortfolioTokenWithTarget(
        name=f"{symbol} Token",
        address=address or f"0x{symbol.lower():0>40}",
        symbol=symbol,
        decimals=decimals,
        value_usd=value_usd,
        amount=amount,
        target_value_usd=target_value_usd,
        target_amount=target_value_usd / price if price else 0.0,
    )


class FakeSwapClient:
    """Records every collaborator request; swap value mirrors the sell amount for native sells"""

    def __init__(self, fail_on_swap: int | None = None):
        self.approval_calls = []
        self.swap_calls = []
        self.fail_on_swap = fail_on_swap

    async def get_approval_transaction(self, token_address, amount):
        self.approval_calls.append((token_address, amount))
        return Transaction(to=token_address, data="0x095ea7b3", type="approval")

    async def get_swap_transaction(self, from_token, to_token, amount, wallet_address):
        self.swap_calls.append((from_token, to_token, amount, wallet_address))
        if self.fail_on_swap is not None and len(self.swap_calls) == self.fail_on_swap:
            raise SwapAPIError("API returned status 400: insufficient liquidity", status=400)
        value = amount if from_token.lower() == NATIVE_TOKEN_ADDRESS else "0"
        return Transaction(to=ROUTER, data="0x07ed2379", value=value, type="swap", to_amount="1")

    @property
    def call_count(self):
        return len(self.approval_calls) + len(self.swap_calls)


class RecordingTransactionClient(TransactionClient):
    backend_name = "Recording"

    def __init__(self, address=WALLET, error: Exception | None = None):
        super().__init__()
        self._address = address
        self.error = error
        self.batches: List[List[Transaction]] = []

    @property
    def address(self):
        return self._address

    async def _submit_batch(self, transactions):
        self.batches.append(list(transactions))
        if self.error:
            raise self.error
        return RebalanceResult(success=True, batch_id="0xbatch", transaction_count=len(transactions))


@pytest.fixture(autouse=True)
def _no_loaded_config():
    reset_config()
    yield
    reset_config()


@pytest.fixture
def config():
    return AppConfig()


@pytest.fixture
def four_token_portfolio():
    return [
        make_token("A", 250.0, 500.0),
        make_token("B", 250.0, 300.0),
        make_token("C", 250.0, 100.0),
        make_token("D", 250.0, 100.0),
    ]
