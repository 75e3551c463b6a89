"""Application configuration management for the wallet rebalancer."""

from .models import (
    AppConfig,
    OneInchConfig,
    SwapConfig,
    RebalanceConfig,
    WalletConfig,
    LoggingConfig,
)
from .loader import load_config, get_config, reset_config

__all__ = [
    "AppConfig",
    "OneInchConfig",
    "SwapConfig",
    "RebalanceConfig",
    "WalletConfig",
    "LoggingConfig",
    "load_config",
    "get_config",
    "reset_config",
]
