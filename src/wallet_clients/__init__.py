from .models import AmountValidation, CallsStatus, ConnectionType
from .smart_account import SmartAccountSession, SmartAccountTransactionClient
from .wallet_calls import WalletCallsTransactionClient
from .rpc import WalletRpcSession
from .factory import create_transaction_client
from .transfers import (
    build_approve_and_transfer_transactions,
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

__version__ = "1.0.0"

__all__ = [
    "AmountValidation",
    "CallsStatus",
    "ConnectionType",
    "SmartAccountSession",
    "SmartAccountTransactionClient",
    "WalletCallsTransactionClient",
    "WalletRpcSession",
    "create_transaction_client",
    "build_approve_and_transfer_transactions",
    "build_transfer_transaction",
    "encode_approve_call",
    "encode_transfer_call",
    "format_currency",
    "get_tokens_with_balance",
    "parse_units",
    "send_token",
    "send_token_with_approval",
    "validate_send_amount",
    "__version__",
]
