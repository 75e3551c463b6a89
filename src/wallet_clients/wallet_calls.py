"""Wallet-native backend: one wallet_sendCalls batch, returns the calls id"""

import asyncio
import logging
from typing import Any, Awaitable, Callable, Dict, List, Optional

try:
    from wallet_connector_base import (
        TransactionClient,
        Transaction,
        RebalanceResult,
        BatchSubmissionError,
    )
    from app_config import AppConfig, get_config
    from .models import CallsStatus
    from .rpc import WalletRpcSession
except ImportError as e:
    raise ImportError(
        f"Failed to import required packages: {e}. "
        "Ensure wallet-connector-base and app-config packages are installed."
    )

SendCalls = Callable[[Dict[str, Any]], Awaitable[Any]]
GetCallsStatus = Callable[[str], Awaitable[CallsStatus]]


def _calls_id(result: Any) -> Optional[str]:
    if isinstance(result, str):
        return result
    if isinstance(result, dict):
        return result.get("id")
    return getattr(result, "id", None)


class WalletCallsTransactionClient(TransactionClient):
    """Submits every transaction as one call of a wallet_sendCalls batch

    Submission returns as soon as the wallet accepts the batch; the calls id
    is reported as batch_id. Use wait_for_calls to follow it on chain.
    """

    backend_name = "Wallet calls"

    def __init__(self, address: Optional[str], send_calls: SendCalls,
                 get_calls_status: Optional[GetCallsStatus] = None,
                 config: Optional[AppConfig] = None, logger: Optional[logging.Logger] = None):
        super().__init__(logger)
        self._address = address or ""
        self._send_calls = send_calls
        self._get_calls_status = get_calls_status
        self._config = config

    @classmethod
    def from_rpc_session(cls, session: WalletRpcSession,
                         logger: Optional[logging.Logger] = None) -> "WalletCallsTransactionClient":
        return cls(session.address, session.send_calls, session.get_calls_status,
                   config=session.config, logger=logger)

    @property
    def address(self) -> str:
        return self._address

    @property
    def config(self) -> AppConfig:
        return self._config or get_config()

    @staticmethod
    def to_calls(transactions: List[Transaction]) -> List[Dict[str, Any]]:
        return [
            {"to": tx.to, "data": tx.data, "value": int(tx.value)}
            for tx in transactions
        ]

    async def _submit_batch(self, transactions: List[Transaction]) -> RebalanceResult:
        response = await self._send_calls({"calls": self.to_calls(transactions)})
        calls_id = _calls_id(response)
        if not calls_id:
            raise BatchSubmissionError("Wallet returned no calls id")

        return RebalanceResult(
            success=True,
            batch_id=calls_id,
            transaction_count=len(transactions)
        )

    async def wait_for_calls(self, calls_id: str) -> CallsStatus:
        """Poll the wallet until the batch leaves the pending state

        Raises TimeoutError when it is still pending after the configured timeout.
        """
        if self._get_calls_status is None:
            raise BatchSubmissionError("Wallet does not expose calls status")

        wallet_config = self.config.wallet
        loop = asyncio.get_running_loop()
        deadline = loop.time() + wallet_config.status_timeout_seconds

        while True:
            status = await self._get_calls_status(calls_id)
            if not status.is_pending:
                self.logger.info(
                    f"Calls {calls_id} finished with status {status.status}",
                    extra={'event': 'calls_status_final', 'batch_id': calls_id,
                           'status': status.status}
                )
                return status

            if loop.time() >= deadline:
                raise TimeoutError(
                    f"Calls {calls_id} still pending after {wallet_config.status_timeout_seconds}s"
                )
            await asyncio.sleep(wallet_config.status_poll_interval_seconds)
