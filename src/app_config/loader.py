"""Configuration loader with validation and singleton access."""

import logging
import yaml
from pathlib import Path
from typing import Any, Dict, Optional, Union

from .models import AppConfig

logger = logging.getLogger(__name__)

# Global config singleton
_config: Optional[AppConfig] = None


def load_config(source: Union[str, Path, Dict[str, Any]]) -> AppConfig:
    """
    Load and validate configuration from a YAML file or a raw mapping.

    Args:
        source: Path to config.yaml, or an already-parsed mapping

    Returns:
        Validated AppConfig instance

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValueError: If config validation fails
        yaml.YAMLError: If YAML parsing fails
    """
    global _config

    if isinstance(source, dict):
        raw_config = source
        logger.info("Loading configuration from mapping")
    elif isinstance(source, (str, Path)):
        config_path = Path(source)

        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        logger.info(f"Loading configuration from: {config_path}")

        with open(config_path, 'r') as f:
            raw_config = yaml.safe_load(f)
    else:
        raise TypeError("config source must be a path or mapping")

    if raw_config is None:
        raw_config = {}

    try:
        _config = AppConfig(**raw_config)
    except Exception as e:
        logger.error(f"Configuration validation failed: {e}")
        raise ValueError(f"Invalid configuration: {e}") from e

    # Log loaded configuration for audit trail
    logger.info("Configuration loaded successfully:")
    logger.info(f"  API base URL: {_config.oneinch.base_url}")
    logger.info(f"  Chain ID: {_config.oneinch.chain_id}")
    logger.info(f"  Request timeout: {_config.oneinch.request_timeout_seconds}s")
    logger.info(f"  Swap slippage: {_config.swap.slippage_percent}%")
    logger.info(f"  Dead zone: ${_config.rebalance.dead_zone_usd}")
    logger.info(f"  Wallet RPC: {_config.wallet.rpc_url}")
    logger.info(f"  Atomic calls required: {_config.wallet.atomic_required}")

    return _config


def get_config() -> AppConfig:
    """
    Get the current loaded configuration.

    Returns:
        Current AppConfig instance

    Raises:
        RuntimeError: If config hasn't been loaded yet
    """
    if _config is None:
        raise RuntimeError(
            "Configuration not loaded. Call load_config() first."
        )
    return _config


def reset_config() -> None:
    """Forget the loaded configuration."""
    global _config
    _config = None
