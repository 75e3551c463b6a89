from .calculator import SwapCalculator, usd_to_token_wei
from .models import TokenDelta, SwapCalculationResult
from .targets import (
    allocations_match,
    build_tokens_with_targets,
    calculate_current_allocations,
    equal_target_allocations,
    total_portfolio_value,
)
from wallet_connector_base import PortfolioToken, PortfolioTokenWithTarget, SwapInstruction

__version__ = "1.0.0"

__all__ = [
    "SwapCalculator",
    "usd_to_token_wei",
    "TokenDelta",
    "SwapCalculationResult",
    "allocations_match",
    "build_tokens_with_targets",
    "calculate_current_allocations",
    "equal_target_allocations",
    "total_portfolio_value",
    "PortfolioToken",
    "PortfolioTokenWithTarget",
    "SwapInstruction",
    "__version__",
]
