from abc import ABC, abstractmethod
from typing import List, Optional
import logging
from .base_client import TransactionClient
from .models import RebalanceResult, CalculateRebalanceResult, PortfolioTokenWithTarget

class BaseRebalancer(ABC):
    """Base rebalancer class with common functionality"""

    def __init__(self, transaction_client: TransactionClient, logger: Optional[logging.Logger] = None):
        self.client = transaction_client
        self.logger = logger or logging.getLogger(__name__)

    @abstractmethod
    async def rebalance_portfolio(self, tokens: List[PortfolioTokenWithTarget],
                                  wallet_address: str) -> RebalanceResult:
        """Execute live rebalancing for a wallet"""
        pass

    @abstractmethod
    async def calculate_rebalance(self, tokens: List[PortfolioTokenWithTarget]) -> CalculateRebalanceResult:
        """Calculate rebalance without executing (preview mode)"""
        pass
