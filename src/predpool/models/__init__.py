"""Canonical schema (Pydantic) - Entry, ScoredEntry, PayoutResult, ResolutionConfig."""

from predpool.models.config import GateScope, PoolMode, ResolutionConfig, StakeWeight
from predpool.models.entry import Entry, PayoutResult, ScoredEntry

__all__ = [
    "Entry",
    "ScoredEntry",
    "PayoutResult",
    "ResolutionConfig",
    "PoolMode",
    "StakeWeight",
    "GateScope",
]
