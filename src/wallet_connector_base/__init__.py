from .base_client import TransactionClient
from .base_rebalancer import BaseRebalancer
from .models import (
    NATIVE_TOKEN_ADDRESS,
    is_native_token,
    # Portfolio models
    PortfolioToken,
    PortfolioTokenWithTarget,
    # Swap and transaction models
    SwapInstruction,
    Transaction,
    TransactionKind,
    # Rebalancing result models
    RebalanceResult,
    CalculateRebalanceResult,
)
from .exceptions import (
    WalletConnectionError,
    SwapAPIError,
    TransactionGenerationError,
    BatchSubmissionError,
)

__version__ = "1.0.0"

__all__ = [
    "TransactionClient",
    "BaseRebalancer",
    "NATIVE_TOKEN_ADDRESS",
    "is_native_token",
    "PortfolioToken",
    "PortfolioTokenWithTarget",
    "SwapInstruction",
    "Transaction",
    "TransactionKind",
    "RebalanceResult",
    "CalculateRebalanceResult",
    "WalletConnectionError",
    "SwapAPIError",
    "TransactionGenerationError",
    "BatchSubmissionError",
    "__version__",
]
