"""Rebalance orchestration: calculate swaps, generate transactions, submit one batch"""

from typing import List, Optional
import logging

try:
    from wallet_connector_base import (
        BaseRebalancer,
        TransactionClient,
        PortfolioTokenWithTarget,
        RebalanceResult,
        CalculateRebalanceResult,
        SwapInstruction,
        Transaction,
    )
    from app_config import AppConfig, get_config
    from rebalance_calculator import SwapCalculator
    from rebalance_logging import rebalance_run
    from .client import OneInchClient
    from .transaction_generator import TransactionGenerator
except ImportError as e:
    raise ImportError(
        f"Failed to import required packages: {e}. "
        "Ensure packages are installed."
    )


class SwapRebalancer(BaseRebalancer):
    """Rebalancer that executes all swaps as a single atomic wallet batch

    Every call owns its own deltas, swaps and transactions. Two overlapping
    rebalances for the same account are not prevented here and could submit
    conflicting batches; callers must serialize them.
    """

    def __init__(self, transaction_client: TransactionClient, swap_client: Optional[OneInchClient] = None,
                 config: Optional[AppConfig] = None, logger: Optional[logging.Logger] = None):
        self.config = config or get_config()
        super().__init__(transaction_client, logger)
        self.swap_client = swap_client or OneInchClient(config=self.config, logger=self.logger)
        self.calculator = SwapCalculator(config=self.config, logger=self.logger)
        self.generator = TransactionGenerator(self.swap_client, config=self.config, logger=self.logger)

    async def rebalance_portfolio(self, tokens: List[PortfolioTokenWithTarget],
                                  wallet_address: str) -> RebalanceResult:
        """Execute rebalancing for a wallet. Never raises."""
        with rebalance_run(wallet_address):
            self.logger.info(f"Starting rebalance for wallet {wallet_address}")

            try:
                self._log_target_allocations(tokens)

                calculation = self.calculator.generate_optimal_swaps(tokens)
                self._log_planned_swaps(calculation.swaps)

                if not calculation.swaps:
                    self.logger.info(
                        "Portfolio already balanced, nothing to submit",
                        extra={'event': 'rebalance_noop'}
                    )
                    return RebalanceResult(
                        success=True,
                        transaction_count=0,
                        message="No rebalancing needed",
                        warnings=calculation.warnings
                    )

                return await self.execute_swaps(calculation.swaps, wallet_address,
                                                 warnings=calculation.warnings)

            except Exception as e:
                return self._failed(e, swaps=[])

    async def execute_swaps(self, swaps: List[SwapInstruction], wallet_address: str,
                            warnings: Optional[List[str]] = None) -> RebalanceResult:
        """Generate and submit transactions for already-calculated swaps. Never raises."""
        warnings = list(warnings or [])

        if not swaps:
            return RebalanceResult(success=True, transaction_count=0,
                                   message="No rebalancing needed", warnings=warnings)

        try:
            transactions = await self.generator.generate(swaps, wallet_address)
            result = await self.submit_transactions(transactions)
        except Exception as e:
            return self._failed(e, swaps=swaps, warnings=warnings)

        result = result.model_copy(update={
            'swaps': swaps,
            'warnings': warnings + result.warnings,
        })

        if result.success:
            self.logger.info(
                f"Rebalance completed: {result.transaction_count} transactions "
                f"(tx_hash={result.tx_hash}, batch_id={result.batch_id})",
                extra={'event': 'rebalance_completed', 'tx_hash': result.tx_hash,
                       'batch_id': result.batch_id}
            )
        else:
            self.logger.error(
                f"Rebalance failed: {result.error}",
                extra={'event': 'rebalance_failed'}
            )
        return result

    async def submit_transactions(self, transactions: List[Transaction]) -> RebalanceResult:
        """Send the batch through the wallet transport"""
        self.logger.info(f"Batching {len(transactions)} transactions for account {self.client.address}")
        return await self.client.send_batched_transactions(transactions)

    async def calculate_rebalance(self, tokens: List[PortfolioTokenWithTarget]) -> CalculateRebalanceResult:
        """Calculate swaps without generating or submitting anything (preview)"""
        self._log_target_allocations(tokens)

        calculation = self.calculator.generate_optimal_swaps(tokens)

        self._log_planned_swaps(calculation.swaps, is_preview=True)

        return CalculateRebalanceResult(
            proposed_swaps=calculation.swaps,
            current_value=sum(t.value_usd for t in tokens),
            total_swap_value_usd=calculation.total_swap_value_usd,
            success=True,
            warnings=calculation.warnings
        )

    def _failed(self, error: Exception, swaps: List[SwapInstruction],
                warnings: Optional[List[str]] = None) -> RebalanceResult:
        message = str(error) or "Unknown error in rebalancing execution"
        self.logger.error(f"Rebalance failed: {message}", extra={'event': 'rebalance_failed'})
        return RebalanceResult(
            success=False,
            error=message,
            swaps=swaps,
            warnings=warnings or []
        )

    def _log_target_allocations(self, tokens: List[PortfolioTokenWithTarget]):
        """Log current vs target value per token"""
        total_value = sum(t.value_usd for t in tokens)
        total_target = sum(t.target_value_usd for t in tokens)

        self.logger.info(f"====== TARGET ALLOCATIONS ({len(tokens)}) ======")
        for token in tokens:
            current_pct = (token.value_usd / total_value * 100) if total_value > 0 else 0
            target_pct = (token.target_value_usd / total_target * 100) if total_target > 0 else 0
            self.logger.info(f"  {token.symbol}: ${token.value_usd:,.2f} ({current_pct:.2f}%) "
                             f"-> ${token.target_value_usd:,.2f} ({target_pct:.2f}%)")

        self.logger.info(f"Total Value: ${total_value:,.2f}, Total Target: ${total_target:,.2f}")
        self.logger.info("=" * 35)

    def _log_planned_swaps(self, swaps: List[SwapInstruction], is_preview: bool = False):
        """Log planned swaps"""
        stage = "PROPOSED SWAPS (PREVIEW)" if is_preview else "PLANNED SWAPS"
        self.logger.info(f"====== {stage} ======")

        if not swaps:
            self.logger.info("No swaps required - portfolio is already balanced")
            self.logger.info("=" * (len(stage) + 14))
            return

        total_value = sum(s.amount_usd for s in swaps)
        self.logger.info(f"Total Swaps: {len(swaps)}, Total Value: ${total_value:,.2f}")

        for swap in swaps:
            self.logger.info(f"  SWAP ${swap.amount_usd:,.2f} {swap.from_symbol} -> {swap.to_symbol} "
                             f"({swap.amount_in_wei} wei)")

        self.logger.info("=" * (len(stage) + 14))


async def execute_portfolio_rebalancing(client: TransactionClient,
                                        tokens: List[PortfolioTokenWithTarget],
                                        wallet_address: str,
                                        swap_client: Optional[OneInchClient] = None,
                                        config: Optional[AppConfig] = None,
                                        logger: Optional[logging.Logger] = None) -> RebalanceResult:
    """End-to-end rebalance through the given wallet transport. Never raises."""
    try:
        rebalancer = SwapRebalancer(client, swap_client=swap_client, config=config, logger=logger)
    except Exception as e:
        return RebalanceResult(success=False, error=str(e) or "Rebalancer could not be created")
    return await rebalancer.rebalance_portfolio(tokens, wallet_address)
