"""Scoring and tiered payout engine."""

from predpool.engine.resolver import MarketSummary, PoolSummary, resolve_market, sort_for_display, summarize
from predpool.engine.score import ScoreCalculator, days_between, prediction_error
from predpool.engine.submarkets import SubmarketPartitioner
from predpool.engine.tiers import TierAllocator, ranking_key

__all__ = [
    "ScoreCalculator",
    "TierAllocator",
    "SubmarketPartitioner",
    "resolve_market",
    "summarize",
    "sort_for_display",
    "MarketSummary",
    "PoolSummary",
    "days_between",
    "prediction_error",
    "ranking_key",
]
