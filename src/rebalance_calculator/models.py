from typing import List
from pydantic import BaseModel, Field
from wallet_connector_base import SwapInstruction

class TokenDelta(BaseModel):
    """Signed USD difference between a token's target and current value"""
    address: str
    symbol: str
    decimals: int
    current_usd: float
    target_usd: float
    delta_usd: float  # Positive = need to buy, Negative = need to sell
    current_price: float

class SwapCalculationResult(BaseModel):
    """Result of swap calculation with warnings"""
    swaps: List[SwapInstruction]
    warnings: List[str] = Field(default_factory=list)
    surplus_usd: float = 0.0
    deficit_usd: float = 0.0

    @property
    def total_swap_value_usd(self) -> float:
        return sum(s.amount_usd for s in self.swaps)
