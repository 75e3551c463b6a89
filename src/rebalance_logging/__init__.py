from .context import (
    RunContext,
    get_current_run,
    rebalance_run,
)
from .logger import (
    CompressingTimedRotatingFileHandler,
    StructuredFormatter,
    configure_root_logger,
)

__all__ = [
    "RunContext",
    "get_current_run",
    "rebalance_run",
    "CompressingTimedRotatingFileHandler",
    "StructuredFormatter",
    "configure_root_logger",
]
