"""Swap calculation logic with greedy surplus/deficit matching"""

from typing import List, Optional, Tuple
import logging
import math
from wallet_connector_base import PortfolioTokenWithTarget, SwapInstruction
from app_config import AppConfig, get_config
from .models import TokenDelta, SwapCalculationResult


def usd_to_token_wei(usd_amount: float, token_price: float, decimals: int) -> str:
    """Convert a USD amount to the token's smallest unit, truncating toward zero"""
    token_amount = usd_amount / token_price
    amount_in_wei = math.floor(token_amount * 10 ** decimals)
    return str(max(0, int(amount_in_wei)))


class SwapCalculator:
    """Calculate the pairwise swaps needed to move a portfolio to its targets"""

    def __init__(self, config: Optional[AppConfig] = None, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger(__name__)
        self.config = config or get_config()
        self.dead_zone = self.config.rebalance.dead_zone_usd

    def generate_optimal_swaps(self, tokens: List[PortfolioTokenWithTarget]) -> SwapCalculationResult:
        """
        Calculate swap instructions for tokens with target values.
        Returns SwapCalculationResult containing swaps and warnings
        """
        warnings: List[str] = []
        self.logger.debug(f"Generating swaps for {len(tokens)} tokens")

        deltas = self.calculate_deltas(tokens, warnings)

        if not deltas:
            self.logger.info(
                "No rebalancing needed - all tokens are within target ranges",
                extra={'event': 'swaps_generated', 'swap_count': 0}
            )
            return SwapCalculationResult(swaps=[], warnings=warnings)

        surplus, deficit = self.separate_surplus_deficit(deltas)
        surplus_usd = sum(abs(d.delta_usd) for d in surplus)
        deficit_usd = sum(d.delta_usd for d in deficit)

        swaps = self.generate_swap_pairs(surplus, deficit)

        total_swapped = sum(s.amount_usd for s in swaps)
        self.logger.info(
            f"Generated {len(swaps)} swaps totalling ${total_swapped:,.2f}",
            extra={'event': 'swaps_generated', 'swap_count': len(swaps),
                   'total_swap_usd': total_swapped}
        )
        for index, swap in enumerate(swaps, start=1):
            self.logger.debug(
                f"  {index}. Swap ${swap.amount_usd:.2f} {swap.from_symbol} -> {swap.to_symbol} "
                f"({swap.amount_in_wei} wei)"
            )

        return SwapCalculationResult(
            swaps=swaps,
            warnings=warnings,
            surplus_usd=surplus_usd,
            deficit_usd=deficit_usd
        )

    def calculate_deltas(self, tokens: List[PortfolioTokenWithTarget],
                         warnings: Optional[List[str]] = None) -> List[TokenDelta]:
        """Calculate per-token USD deltas, dropping those inside the dead zone"""
        if warnings is None:
            warnings = []
        deltas = []

        for token in tokens:
            delta_usd = token.target_value_usd - token.value_usd

            # Only process tokens with significant changes
            if abs(delta_usd) <= self.dead_zone:
                continue

            if token.amount == 0:
                if token.value_usd == 0:
                    self.logger.debug(
                        f"Skipping {token.symbol}: no holdings to price",
                        extra={'event': 'delta_skipped', 'symbol': token.symbol}
                    )
                    continue
                warning_message = (
                    f"Cannot price {token.symbol} ({token.address}): "
                    f"amount is 0 but value is ${token.value_usd:.2f}. Token skipped."
                )
                warnings.append(warning_message)
                self.logger.error(
                    warning_message,
                    extra={'event': 'delta_price_error', 'symbol': token.symbol}
                )
                continue

            deltas.append(TokenDelta(
                address=token.address,
                symbol=token.symbol,
                decimals=token.decimals,
                current_usd=token.value_usd,
                target_usd=token.target_value_usd,
                delta_usd=delta_usd,
                current_price=token.value_usd / token.amount
            ))

        self.logger.info(
            f"Found {len(deltas)} of {len(tokens)} tokens needing rebalancing",
            extra={'event': 'deltas_calculated', 'token_count': len(tokens),
                   'delta_count': len(deltas)}
        )
        return deltas

    def separate_surplus_deficit(self, deltas: List[TokenDelta]) -> Tuple[List[TokenDelta], List[TokenDelta]]:
        """Split deltas into tokens to sell (surplus) and tokens to buy (deficit)"""
        surplus = [d for d in deltas if d.delta_usd < -self.dead_zone]
        deficit = [d for d in deltas if d.delta_usd > self.dead_zone]

        # Largest imbalances first; sort is stable so ties keep input order
        surplus.sort(key=lambda d: d.delta_usd)
        deficit.sort(key=lambda d: -d.delta_usd)

        self.logger.info(
            f"Surplus tokens (sell): {len(surplus)}, deficit tokens (buy): {len(deficit)}",
            extra={'event': 'surplus_deficit_separated', 'surplus_count': len(surplus),
                   'deficit_count': len(deficit)}
        )
        for d in surplus:
            self.logger.debug(f"  Sell {d.symbol}: ${abs(d.delta_usd):.2f}")
        for d in deficit:
            self.logger.debug(f"  Buy {d.symbol}: ${d.delta_usd:.2f}")

        return surplus, deficit

    def generate_swap_pairs(self, surplus: List[TokenDelta], deficit: List[TokenDelta]) -> List[SwapInstruction]:
        """Greedily pair the largest remaining sell with the largest remaining buy"""
        swaps = []
        # Working copies are decremented in place and discarded on return
        sells = [d.model_copy() for d in surplus]
        buys = [d.model_copy() for d in deficit]

        while sells and buys:
            sell_token = sells[0]
            buy_token = buys[0]

            swap_amount_usd = min(abs(sell_token.delta_usd), abs(buy_token.delta_usd))

            amount_in_wei = usd_to_token_wei(
                swap_amount_usd,
                sell_token.current_price,
                sell_token.decimals
            )

            swaps.append(SwapInstruction(
                from_token=sell_token.address,
                to_token=buy_token.address,
                from_symbol=sell_token.symbol,
                to_symbol=buy_token.symbol,
                amount_in_wei=amount_in_wei,
                amount_usd=swap_amount_usd
            ))

            sell_token.delta_usd += swap_amount_usd
            buy_token.delta_usd -= swap_amount_usd

            if abs(sell_token.delta_usd) < self.dead_zone:
                sells.pop(0)
            if abs(buy_token.delta_usd) < self.dead_zone:
                buys.pop(0)

        residual = sum(abs(d.delta_usd) for d in sells + buys)
        if residual:
            self.logger.debug(f"Discarding ${residual:.4f} of unmatched residual delta")

        return swaps
