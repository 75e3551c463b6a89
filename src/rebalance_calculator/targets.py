"""Target allocation helpers: turn percentages into target USD values per token"""

from typing import Dict, List, Mapping, Optional
import logging
from wallet_connector_base import PortfolioToken, PortfolioTokenWithTarget
from app_config import AppConfig, get_config

logger = logging.getLogger(__name__)


def total_portfolio_value(tokens: List[PortfolioToken]) -> float:
    return sum(token.value_usd for token in tokens)


def calculate_current_allocations(tokens: List[PortfolioToken]) -> Dict[str, float]:
    """Current allocation of each token as a percentage of total value"""
    total_value = total_portfolio_value(tokens)
    return {
        token.address: (token.value_usd / total_value * 100) if total_value > 0 else 0.0
        for token in tokens
    }


def equal_target_allocations(tokens: List[PortfolioToken]) -> Dict[str, int]:
    """Whole-percent equal split; the remainder goes to the first token so the total is 100"""
    if not tokens:
        return {}

    equal_allocation = 100 // len(tokens)
    remainder = 100 - equal_allocation * len(tokens)

    return {
        token.address: equal_allocation + (remainder if index == 0 else 0)
        for index, token in enumerate(tokens)
    }


def allocations_match(tokens: List[PortfolioToken], target_allocations: Mapping[str, float],
                      tolerance_percent: Optional[float] = None,
                      config: Optional[AppConfig] = None) -> bool:
    """True when every token has a target and sits within tolerance of it

    Tolerance defaults to rebalance.allocation_match_tolerance_percent.
    """
    if tolerance_percent is None:
        tolerance_percent = (config or get_config()).rebalance.allocation_match_tolerance_percent
    current = calculate_current_allocations(tokens)
    for token in tokens:
        target = target_allocations.get(token.address)
        if target is None:
            return False
        if abs(current[token.address] - target) >= tolerance_percent:
            return False
    return True


def build_tokens_with_targets(tokens: List[PortfolioToken],
                              target_allocations: Mapping[str, float]) -> List[PortfolioTokenWithTarget]:
    """
    Apply target percentages (keyed by token address) to the total portfolio value.

    Percentages are rescaled to sum to exactly 100 so the targets add up to the
    current portfolio value.

    Raises:
        ValueError: If the target percentages do not round to 100
    """
    total_target = sum(target_allocations.get(token.address, 0) or 0 for token in tokens)
    if round(total_target) != 100:
        raise ValueError(f"Target allocations must total 100%, got {total_target:.2f}%")
    scale = 100 / total_target

    total_value = total_portfolio_value(tokens)
    result = []

    for token in tokens:
        target_percentage = target_allocations.get(token.address, 0) or 0
        target_value_usd = (target_percentage * scale / 100) * total_value
        current_price = token.current_price
        target_amount = target_value_usd / current_price if current_price > 0 else 0.0

        logger.debug(
            f"Token {token.symbol}: current=${token.value_usd:,.2f} target={target_percentage}% "
            f"(${target_value_usd:,.2f}, difference ${target_value_usd - token.value_usd:,.2f})"
        )

        result.append(PortfolioTokenWithTarget(
            **token.model_dump(include=set(PortfolioToken.model_fields)),
            target_value_usd=target_value_usd,
            target_amount=target_amount
        ))

    return result
