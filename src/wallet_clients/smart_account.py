"""Smart-account backend: one batched UserOperation, waits for mining"""

import logging
from typing import Any, Dict, List, Optional, Protocol, Union

try:
    from wallet_connector_base import (
        TransactionClient,
        Transaction,
        RebalanceResult,
        BatchSubmissionError,
    )
except ImportError as e:
    raise ImportError(
        f"Failed to import required packages: {e}. "
        "Ensure wallet-connector-base package is installed."
    )


class SmartAccountSession(Protocol):
    """Connected smart account able to send UserOperations"""

    @property
    def address(self) -> Optional[str]: ...

    async def send_user_operation(self, uo: List[Dict[str, Any]]) -> Union[str, Dict[str, Any], Any]: ...

    async def wait_for_user_operation_transaction(self, hash: str) -> str: ...


def _operation_hash(result: Any) -> Optional[str]:
    # Sessions answer either with the bare hash or an object carrying it
    if isinstance(result, str):
        return result
    if isinstance(result, dict):
        return result.get("hash")
    return getattr(result, "hash", None)


class SmartAccountTransactionClient(TransactionClient):
    """Submits every transaction as one call of a single UserOperation"""

    backend_name = "Smart account"

    def __init__(self, session: SmartAccountSession, logger: Optional[logging.Logger] = None):
        super().__init__(logger)
        self.session = session

    @property
    def address(self) -> str:
        if self.session is None:
            return ""
        return getattr(self.session, "address", None) or ""

    @staticmethod
    def to_user_operation_calls(transactions: List[Transaction]) -> List[Dict[str, Any]]:
        return [
            {"target": tx.to, "data": tx.data, "value": int(tx.value)}
            for tx in transactions
        ]

    async def _submit_batch(self, transactions: List[Transaction]) -> RebalanceResult:
        calls = self.to_user_operation_calls(transactions)

        operation = await self.session.send_user_operation(calls)
        operation_hash = _operation_hash(operation)
        if not operation_hash:
            raise BatchSubmissionError("Smart account returned no user operation hash")

        self.logger.info(f"User operation submitted: {operation_hash}, waiting for transaction")
        tx_hash = await self.session.wait_for_user_operation_transaction(operation_hash)
        self.logger.info(f"User operation mined in transaction {tx_hash}")

        return RebalanceResult(
            success=True,
            tx_hash=tx_hash,
            batch_id=operation_hash,
            transaction_count=len(transactions)
        )
