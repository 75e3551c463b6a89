"""
Rebalance run context using ContextVar for async-safe context propagation.
"""

import uuid
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Iterator, Optional


@dataclass(frozen=True)
class RunContext:
    """Identifies one rebalance attempt in log records"""
    wallet_address: str
    run_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    started_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


# Context variable to store the current run across async boundaries
current_run: ContextVar[Optional[RunContext]] = ContextVar('current_run', default=None)


def get_current_run() -> Optional[RunContext]:
    """Get the current run from the context."""
    return current_run.get()


@contextmanager
def rebalance_run(wallet_address: str) -> Iterator[RunContext]:
    """Scope a new run context to the enclosed block, restoring the previous one after."""
    run = RunContext(wallet_address=wallet_address)
    token = current_run.set(run)
    try:
        yield run
    finally:
        current_run.reset(token)
