from abc import ABC, abstractmethod
from typing import List, Optional
import logging
from .models import Transaction, RebalanceResult

class TransactionClient(ABC):
    """Abstract base class for wallet transports that submit atomic batches

    Concurrent overlapping submissions for the same account are not guarded
    here; callers must not run two rebalances for one account at once.
    """

    backend_name = "wallet"

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger(__name__)

    @property
    @abstractmethod
    def address(self) -> str:
        """Connected account address ('' when unavailable)"""
        pass

    @abstractmethod
    async def _submit_batch(self, transactions: List[Transaction]) -> RebalanceResult:
        """Submit a validated, non-empty batch and return a success result"""
        pass

    async def send_batched_transactions(self, transactions: Optional[List[Transaction]]) -> RebalanceResult:
        """Submit transactions as one atomic batch. Never raises."""
        transaction_count = 0

        try:
            transaction_count = len(transactions) if transactions else 0

            if not self.address:
                raise ValueError(f"{self.backend_name} address not available")

            if not transactions:
                raise ValueError("No transactions to execute")

            self.logger.info(
                f"{self.backend_name}: batching {transaction_count} transactions "
                f"({' -> '.join(tx.type for tx in transactions)})",
                extra={'event': 'batch_submitting', 'backend': self.backend_name,
                       'transaction_count': transaction_count}
            )
            result = await self._submit_batch(transactions)
            self.logger.info(
                f"{self.backend_name}: batch submitted (batch_id={result.batch_id}, tx_hash={result.tx_hash})",
                extra={'event': 'batch_submitted', 'backend': self.backend_name,
                       'batch_id': result.batch_id, 'tx_hash': result.tx_hash}
            )
            return result

        except Exception as e:
            error = str(e) or f"{self.backend_name} transaction failed"
            self.logger.error(
                f"{self.backend_name} transaction error: {error}",
                extra={'event': 'batch_failed', 'backend': self.backend_name}
            )
            return RebalanceResult(
                success=False,
                error=error,
                transaction_count=transaction_count
            )
