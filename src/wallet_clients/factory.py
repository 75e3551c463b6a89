"""Factory for creating wallet transaction clients"""

import logging
from typing import Optional, Union

try:
    from wallet_connector_base import TransactionClient
    from .models import ConnectionType
    from .smart_account import SmartAccountSession, SmartAccountTransactionClient
    from .wallet_calls import GetCallsStatus, SendCalls, WalletCallsTransactionClient
except ImportError as e:
    raise ImportError(
        f"Failed to import wallet packages: {e}. "
        "Ensure packages are installed."
    )

def create_transaction_client(
    connection: Union[ConnectionType, str],
    smart_account_session: Optional[SmartAccountSession] = None,
    address: Optional[str] = None,
    send_calls: Optional[SendCalls] = None,
    get_calls_status: Optional[GetCallsStatus] = None,
    logger: Optional[logging.Logger] = None
) -> TransactionClient:
    """
    Factory to create the transaction client for the active wallet connection.

    Args:
        connection: Which wallet transport the user is connected through
        smart_account_session: Connected smart account (smart_account only)
        address: Connected account address (wallet_calls only)
        send_calls: Wallet's batched-calls entry point (wallet_calls only)
        get_calls_status: Optional calls status lookup (wallet_calls only)
        logger: Optional logger instance

    Returns:
        TransactionClient instance
    """
    try:
        connection = ConnectionType(connection)
    except ValueError:
        raise ValueError(f"Unsupported wallet connection: {connection}")

    if logger:
        logger.debug(f"Creating {connection.value} transaction client")

    if connection is ConnectionType.SMART_ACCOUNT:
        if smart_account_session is None:
            raise ValueError("Smart account connection requires a smart account session")
        return SmartAccountTransactionClient(smart_account_session, logger=logger)

    if send_calls is None:
        raise ValueError("Wallet calls connection requires a send_calls function")
    return WalletCallsTransactionClient(address, send_calls, get_calls_status, logger=logger)
