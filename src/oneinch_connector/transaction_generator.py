"""Turn swap instructions into ordered approval + swap transactions"""

import logging
from typing import List, Optional
from wallet_connector_base import SwapInstruction, Transaction, TransactionGenerationError
from app_config import AppConfig, get_config
from .client import OneInchClient


class TransactionGenerator:
    """Resolve approval and swap transactions for each instruction, strictly in order"""

    def __init__(self, swap_client: OneInchClient, config: Optional[AppConfig] = None,
                 logger: Optional[logging.Logger] = None):
        self.swap_client = swap_client
        self.config = config or get_config()
        self.logger = logger or logging.getLogger(__name__)
        self.native_token_address = self.config.rebalance.native_token_address

    async def generate(self, swaps: List[SwapInstruction], wallet_address: str) -> List[Transaction]:
        """
        Build the transaction list for a batch.

        Each instruction contributes its approval (unless selling the native asset)
        immediately followed by its swap. Any collaborator failure propagates and
        no partial list is returned.
        """
        if not wallet_address:
            raise TransactionGenerationError("Wallet address is required to generate swap transactions")

        self.logger.info(f"Generating transactions for {len(swaps)} swap instructions")
        transactions: List[Transaction] = []

        try:
            for index, swap in enumerate(swaps, start=1):
                self.logger.debug(
                    f"Processing swap {index}/{len(swaps)}: {swap.from_symbol} -> {swap.to_symbol} "
                    f"(${swap.amount_usd:.2f})"
                )

                approval_tx = None
                if swap.from_token.lower() != self.native_token_address:
                    approval_tx = await self.swap_client.get_approval_transaction(
                        swap.from_token,
                        swap.amount_in_wei
                    )

                if approval_tx:
                    transactions.append(approval_tx)
                    self.logger.debug(
                        f"Added approval transaction for {swap.from_symbol}",
                        extra={'event': 'approval_added', 'swap_index': index}
                    )
                else:
                    self.logger.debug(
                        f"No approval needed for {swap.from_symbol}",
                        extra={'event': 'approval_skipped', 'swap_index': index}
                    )

                swap_tx = await self.swap_client.get_swap_transaction(
                    swap.from_token,
                    swap.to_token,
                    swap.amount_in_wei,
                    wallet_address
                )
                transactions.append(swap_tx)
                self.logger.debug(
                    f"Added swap transaction, expected output: {swap_tx.to_amount or 'unknown'} wei",
                    extra={'event': 'swap_added', 'swap_index': index}
                )

        except Exception as e:
            self.logger.error(
                f"Error generating transactions: {e}",
                extra={'event': 'transaction_generation_failed'}
            )
            raise

        self.logger.info(
            f"Generated {len(transactions)} transactions: {' -> '.join(tx.type for tx in transactions)}",
            extra={'event': 'transactions_generated', 'transaction_count': len(transactions)}
        )
        return transactions
