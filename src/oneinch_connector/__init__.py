from .client import OneInchClient
from .transaction_generator import TransactionGenerator
from .rebalancer import SwapRebalancer, execute_portfolio_rebalancing
from .models import PortfolioSnapshotEntry, SwapQuote, TokenMetadata

__version__ = "1.0.0"

__all__ = [
    "OneInchClient",
    "TransactionGenerator",
    "SwapRebalancer",
    "execute_portfolio_rebalancing",
    "PortfolioSnapshotEntry",
    "SwapQuote",
    "TokenMetadata",
    "__version__",
]
