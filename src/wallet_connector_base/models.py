from typing import List, Optional, Literal
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

# Conventional placeholder for the chain's native currency in token-address APIs
NATIVE_TOKEN_ADDRESS = "0xeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeee"


def is_native_token(address: Optional[str]) -> bool:
    """True when the address is the native asset sentinel (any casing)"""
    return bool(address) and address.lower() == NATIVE_TOKEN_ADDRESS


# Portfolio models
class PortfolioToken(BaseModel):
    """One token holding from a portfolio snapshot"""
    name: str
    address: str
    symbol: str
    decimals: int = Field(ge=0)
    value_usd: float = Field(ge=0)
    amount: float = Field(ge=0)  # Human units, not wei
    logo_uri: Optional[str] = None

    @property
    def current_price(self) -> float:
        """USD price per whole token (0 when nothing is held)"""
        if self.amount == 0:
            return 0.0
        return self.value_usd / self.amount

class PortfolioTokenWithTarget(PortfolioToken):
    """Portfolio token with the USD value and amount it should end up at"""
    target_value_usd: float = Field(ge=0)
    target_amount: float = Field(ge=0)

# Swap models
class SwapInstruction(BaseModel):
    """One pairwise trade, sell amount in the sell token's smallest unit"""
    model_config = ConfigDict(frozen=True)

    from_token: str
    to_token: str
    from_symbol: str
    to_symbol: str
    amount_in_wei: str  # String to avoid float precision loss
    amount_usd: float

    @field_validator("amount_in_wei")
    @classmethod
    def validate_amount_in_wei(cls, v: str) -> str:
        if not v.isdigit():
            raise ValueError(f"amount_in_wei must be a non-negative integer string, got '{v}'")
        return v

TransactionKind = Literal['approval', 'swap', 'transfer']

class Transaction(BaseModel):
    """Chain-executable call produced for a batch"""
    model_config = ConfigDict(frozen=True)

    to: str
    data: str
    value: str = "0"  # Native currency in wei
    type: TransactionKind
    description: Optional[str] = None
    to_amount: Optional[str] = None  # Expected output for swaps
    protocols: Optional[list] = None

    @field_validator("value", mode="before")
    @classmethod
    def normalize_value(cls, v) -> str:
        if v is None or v == "":
            return "0"
        if isinstance(v, str) and v.lower().startswith("0x"):
            return str(int(v, 16))
        return str(int(v))

# Rebalancing result models
class RebalanceResult(BaseModel):
    """Outcome of one batched rebalance submission"""
    model_config = ConfigDict(frozen=True)

    success: bool
    tx_hash: Optional[str] = None
    batch_id: Optional[str] = None  # UserOperation hash or wallet calls id
    error: Optional[str] = None
    transaction_count: Optional[int] = None
    swaps: List[SwapInstruction] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)
    message: Optional[str] = None

    @model_validator(mode="after")
    def validate_outcome(self) -> "RebalanceResult":
        if not self.success and not self.error:
            raise ValueError("Failed rebalance result requires an error message")
        if self.success and self.transaction_count and not (self.tx_hash or self.batch_id):
            raise ValueError("Successful submission requires a transaction hash or batch id")
        return self

    @property
    def is_noop(self) -> bool:
        """Nothing was submitted because the portfolio is already balanced"""
        return self.success and not self.transaction_count

class CalculateRebalanceResult(BaseModel):
    """Result of rebalance calculation (preview)"""
    proposed_swaps: List[SwapInstruction]
    current_value: float
    total_swap_value_usd: float = 0.0
    success: bool
    warnings: List[str] = Field(default_factory=list)
