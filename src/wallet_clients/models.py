from enum import Enum
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator

# Status strings returned by wallets implementing the first calls version
_LEGACY_STATUS = {"PENDING": 100, "CONFIRMED": 200}


class ConnectionType(str, Enum):
    """Wallet transport a transaction client submits through"""
    SMART_ACCOUNT = "smart_account"
    WALLET_CALLS = "wallet_calls"


class CallsStatus(BaseModel):
    """Status of a batch submitted with wallet_sendCalls

    Status codes: 1xx pending, 2xx confirmed, 4xx failed off-chain,
    5xx reverted on-chain, 6xx partially executed.
    """
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str
    status: int
    chain_id: Optional[str] = Field(default=None, alias="chainId")
    atomic: Optional[bool] = None
    receipts: List[Dict[str, Any]] = Field(default_factory=list)

    @field_validator("status", mode="before")
    @classmethod
    def normalize_status(cls, v):
        if isinstance(v, str) and v.upper() in _LEGACY_STATUS:
            return _LEGACY_STATUS[v.upper()]
        return v

    @property
    def is_pending(self) -> bool:
        return 100 <= self.status < 200

    @property
    def is_confirmed(self) -> bool:
        return 200 <= self.status < 300

    @property
    def transaction_hashes(self) -> List[str]:
        return [r["transactionHash"] for r in self.receipts if r.get("transactionHash")]


class AmountValidation(BaseModel):
    """Result of checking a user-entered send amount"""
    model_config = ConfigDict(frozen=True)

    is_valid: bool
    error: Optional[str] = None
