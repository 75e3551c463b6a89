"""Pydantic models for application configuration with validation."""

import re
from typing import Literal
from pydantic import BaseModel, Field, field_validator


class OneInchConfig(BaseModel):
    """Swap/portfolio API connection configuration."""

    base_url: str = Field(
        default="https://1inch-proxy-prtfl.vercel.app",
        description="Base URL of the 1inch API (or a proxy in front of it)"
    )
    chain_id: int = Field(
        default=8453,
        ge=1,
        description="Chain the portfolio lives on (8453 = Base)"
    )
    swap_api_version: str = Field(
        default="v6.0",
        description="Version segment of the swap API path"
    )
    portfolio_api_version: str = Field(
        default="v5.0",
        description="Version segment of the portfolio API path"
    )
    token_api_version: str = Field(
        default="v1.3",
        description="Version segment of the token metadata API path"
    )
    request_timeout_seconds: float = Field(
        default=30.0,
        ge=1.0,
        le=120.0,
        description="Total timeout for a single API request"
    )

    @field_validator("base_url")
    @classmethod
    def normalize_base_url(cls, v: str) -> str:
        """Validate scheme and drop any trailing slash."""
        if not re.match(r'^https?://', v):
            raise ValueError(f"Invalid base_url '{v}'. Must start with http:// or https://")
        return v.rstrip('/')


class SwapConfig(BaseModel):
    """Swap quote parameters sent with every swap request."""

    slippage_percent: float = Field(
        default=2.0,
        ge=0.1,
        le=50.0,
        description="Maximum adverse price movement between quote and execution"
    )
    allow_partial_fill: Literal[False] = Field(
        default=False,
        description="Swaps either execute fully at quote or fail"
    )
    disable_estimate: bool = Field(
        default=True,
        description="Skip the API's on-chain balance/allowance estimate (approval is batched first)"
    )


class RebalanceConfig(BaseModel):
    """Rebalance calculation parameters."""

    dead_zone_usd: float = Field(
        default=0.01,
        gt=0.0,
        le=1.0,
        description="Deltas at or below this USD amount are ignored"
    )
    native_token_address: str = Field(
        default="0xeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeee",
        description="Sentinel address representing the chain's native asset"
    )
    allocation_match_tolerance_percent: float = Field(
        default=1.0,
        ge=0.0,
        le=10.0,
        description="Allocations within this percent of target count as balanced"
    )

    @field_validator("native_token_address")
    @classmethod
    def validate_address(cls, v: str) -> str:
        """Validate 0x-prefixed 20-byte hex address."""
        if not re.match(r'^0x[0-9a-fA-F]{40}$', v):
            raise ValueError(f"Invalid address '{v}'. Must be 0x followed by 40 hex characters")
        return v.lower()


class WalletConfig(BaseModel):
    """Wallet RPC configuration for the wallet-native batched calls backend."""

    rpc_url: str = Field(
        default="http://127.0.0.1:8545",
        description="JSON-RPC endpoint exposing wallet_sendCalls"
    )
    calls_version: str = Field(
        default="2.0.0",
        description="wallet_sendCalls request version"
    )
    atomic_required: bool = Field(
        default=True,
        description="Require the wallet to execute the calls atomically"
    )
    request_timeout_seconds: float = Field(
        default=30.0,
        ge=1.0,
        le=120.0,
        description="Timeout for a single wallet RPC request"
    )
    status_poll_interval_seconds: float = Field(
        default=2.0,
        ge=0.1,
        le=30.0,
        description="Delay between wallet_getCallsStatus checks"
    )
    status_timeout_seconds: int = Field(
        default=120,
        ge=5,
        le=900,
        description="Maximum time to wait for a calls batch to reach a final status"
    )


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Root log level"
    )
    format: Literal["json", "text"] = Field(
        default="text",
        description="Structured JSON lines or plain text"
    )

    @field_validator("level", mode="before")
    @classmethod
    def upper_level(cls, v):
        return v.upper() if isinstance(v, str) else v


class AppConfig(BaseModel):
    """Root application configuration."""

    oneinch: OneInchConfig = Field(
        default_factory=OneInchConfig,
        description="Swap/portfolio API settings"
    )
    swap: SwapConfig = Field(
        default_factory=SwapConfig,
        description="Swap quote parameters"
    )
    rebalance: RebalanceConfig = Field(
        default_factory=RebalanceConfig,
        description="Rebalance calculation parameters"
    )
    wallet: WalletConfig = Field(
        default_factory=WalletConfig,
        description="Wallet RPC settings"
    )
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig,
        description="Logging settings"
    )
