from typing import List, Optional, Union
from pydantic import BaseModel, Field

# API response models (only the fields we read)
class UnderlyingToken(BaseModel):
    decimals: int
    value_usd: float
    amount: float  # Human units; the API sends a decimal string or a number

class PortfolioSnapshotEntry(BaseModel):
    contract_name: str
    contract_address: str
    contract_symbol: str
    underlying_tokens: List[UnderlyingToken] = Field(default_factory=list)

class TokenMetadata(BaseModel):
    logo_uri: Optional[str] = Field(default=None, alias="logoURI")

class TxPayload(BaseModel):
    """Call payload returned by the approve and swap endpoints"""
    to: str
    data: str
    value: Optional[Union[str, int]] = "0"

class SwapQuote(BaseModel):
    tx: TxPayload
    to_amount: Optional[str] = Field(default=None, alias="toAmount")
    dst_amount: Optional[str] = Field(default=None, alias="dstAmount")  # v6 name for toAmount
    protocols: Optional[list] = None

    @property
    def expected_output(self) -> Optional[str]:
        return self.to_amount or self.dst_amount
