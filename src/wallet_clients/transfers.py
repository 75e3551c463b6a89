"""Single-token sends through any wallet transaction client"""

import logging
import math
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import List, Optional
from eth_abi import encode as abi_encode
from eth_utils import is_address, keccak, to_checksum_address

try:
    from wallet_connector_base import (
        TransactionClient,
        PortfolioToken,
        Transaction,
        RebalanceResult,
        is_native_token,
    )
    from .models import AmountValidation
except ImportError as e:
    raise ImportError(
        f"Failed to import required packages: {e}. "
        "Ensure wallet-connector-base package is installed."
    )


def _selector(sig: str) -> bytes:
    return keccak(text=sig)[:4]


TRANSFER_SELECTOR = _selector("transfer(address,uint256)")
APPROVE_SELECTOR = _selector("approve(address,uint256)")


def parse_units(amount: str, decimals: int) -> int:
    """Convert a human amount ("1.5") into the token's smallest unit"""
    try:
        value = Decimal(str(amount).strip())
    except InvalidOperation:
        raise ValueError(f"Invalid amount '{amount}'")
    if not value.is_finite():
        raise ValueError(f"Invalid amount '{amount}'")
    return int((value * (Decimal(10) ** decimals)).quantize(Decimal(1), rounding=ROUND_HALF_UP))


def _encode_call(selector: bytes, address: str, amount: int) -> str:
    if not is_address(address):
        raise ValueError(f"Invalid address '{address}'")
    if amount < 0:
        raise ValueError("Amount must not be negative")
    return "0x" + (selector + abi_encode(["address", "uint256"], [to_checksum_address(address), amount])).hex()


def encode_transfer_call(recipient_address: str, amount_in_wei: int) -> str:
    """ABI-encode ERC-20 transfer(recipient, amount)"""
    return _encode_call(TRANSFER_SELECTOR, recipient_address, amount_in_wei)


def encode_approve_call(spender_address: str, amount_in_wei: int) -> str:
    """ABI-encode ERC-20 approve(spender, amount)"""
    return _encode_call(APPROVE_SELECTOR, spender_address, amount_in_wei)


def build_transfer_transaction(token_address: str, recipient_address: str,
                               amount: str, decimals: int) -> Transaction:
    amount_in_wei = parse_units(amount, decimals)
    if amount_in_wei <= 0:
        raise ValueError("Amount must be greater than 0")

    if is_native_token(token_address):
        if not is_address(recipient_address):
            raise ValueError(f"Invalid address '{recipient_address}'")
        return Transaction(
            to=to_checksum_address(recipient_address),
            data="0x",
            value=str(amount_in_wei),
            type='transfer',
            description=f"Send {amount} native to {recipient_address}"
        )

    return Transaction(
        to=token_address,
        data=encode_transfer_call(recipient_address, amount_in_wei),
        value="0",
        type='transfer',
        description=f"Send {amount} of {token_address} to {recipient_address}"
    )


def validate_send_amount(amount: str, available_balance: float) -> AmountValidation:
    try:
        amount_float = float(amount)
    except (TypeError, ValueError):
        amount_float = math.nan

    if math.isnan(amount_float):
        return AmountValidation(is_valid=False, error="Invalid amount format")

    if amount_float <= 0:
        return AmountValidation(is_valid=False, error="Amount must be greater than 0")

    if amount_float > available_balance:
        return AmountValidation(is_valid=False, error="Amount exceeds available balance")

    return AmountValidation(is_valid=True)


def get_tokens_with_balance(tokens: List[PortfolioToken]) -> List[PortfolioToken]:
    return [token for token in tokens if token.amount > 0]


def format_currency(value: float) -> str:
    """US dollar display with two decimals, e.g. $1,234.50"""
    if value < 0:
        return f"-${abs(value):,.2f}"
    return f"${value:,.2f}"


async def send_token(client: TransactionClient, token_address: str, recipient_address: str,
                     amount: str, decimals: int, available_balance: Optional[float] = None,
                     logger: Optional[logging.Logger] = None) -> RebalanceResult:
    """Send one token to a recipient as a single-call batch. Never raises."""
    logger = logger or logging.getLogger(__name__)

    try:
        if available_balance is not None:
            validation = validate_send_amount(amount, available_balance)
            if not validation.is_valid:
                raise ValueError(validation.error)

        transaction = build_transfer_transaction(token_address, recipient_address, amount, decimals)
    except Exception as e:
        logger.error(f"Token transfer rejected: {e}", extra={'event': 'transfer_rejected'})
        return RebalanceResult(success=False, error=str(e) or "Invalid transfer")

    logger.info(
        f"Sending {amount} of {token_address} to {recipient_address}",
        extra={'event': 'transfer_submitting'}
    )
    return await client.send_batched_transactions([transaction])


def build_approve_and_transfer_transactions(token_address: str, recipient_address: str,
                                            spender_address: str, amount: str,
                                            decimals: int) -> List[Transaction]:
    """Approve `spender_address` then transfer the same amount, for one atomic batch"""
    if is_native_token(token_address):
        raise ValueError("Native asset cannot be approved")

    amount_in_wei = parse_units(amount, decimals)
    if amount_in_wei <= 0:
        raise ValueError("Amount must be greater than 0")

    return [
        Transaction(
            to=token_address,
            data=encode_approve_call(spender_address, amount_in_wei),
            value="0",
            type='approval',
            description=f"Approve {spender_address} to spend {amount} of {token_address}"
        ),
        Transaction(
            to=token_address,
            data=encode_transfer_call(recipient_address, amount_in_wei),
            value="0",
            type='transfer',
            description=f"Send {amount} of {token_address} to {recipient_address}"
        ),
    ]


async def send_token_with_approval(client: TransactionClient, token_address: str,
                                   recipient_address: str, spender_address: str,
                                   amount: str, decimals: int,
                                   logger: Optional[logging.Logger] = None) -> RebalanceResult:
    """Submit approve + transfer as one batch so both succeed or both fail. Never raises."""
    logger = logger or logging.getLogger(__name__)

    try:
        transactions = build_approve_and_transfer_transactions(
            token_address, recipient_address, spender_address, amount, decimals
        )
    except Exception as e:
        logger.error(f"Token transfer rejected: {e}", extra={'event': 'transfer_rejected'})
        return RebalanceResult(success=False, error=str(e) or "Invalid transfer")

    logger.info(
        f"Sending {amount} of {token_address} to {recipient_address} with approval for {spender_address}",
        extra={'event': 'transfer_submitting'}
    )
    return await client.send_batched_transactions(transactions)
