"""Market resolution: participant gate, scoring, pool dispatch, and summaries."""

from __future__ import annotations

import math
from collections.abc import Iterable, Sequence
from datetime import datetime

import structlog
from pydantic import BaseModel, Field

from predpool.engine.score import ScoreCalculator
from predpool.engine.submarkets import SubmarketPartitioner, pool_size
from predpool.engine.tiers import TierAllocator
from predpool.models.config import GateScope, PoolMode, ResolutionConfig
from predpool.models.entry import Entry, PayoutResult, ScoredEntry, as_utc

log = structlog.get_logger(__name__)


def score_entries(
    entries: Sequence[Entry],
    market_open_at: datetime | None,
    calculator: ScoreCalculator,
) -> list[ScoredEntry]:
    """Score every entry. An explicit open time wins over the one carried by each entry."""
    open_at = as_utc(market_open_at)
    return [
        calculator.score_entry(e, open_at if open_at is not None else e.market_open_at)
        for e in entries
    ]


def resolve_market(
    entries: Sequence[Entry],
    market_open_at: datetime | None = None,
    config: ResolutionConfig | None = None,
) -> list[PayoutResult]:
    """Score and pay out one resolved market. One result per entry, in input order.

    With fewer than ``config.min_participants`` entries the pool is frozen:
    scores and ranks are still reported but every payout is 0.
    """
    config = config or ResolutionConfig()
    entries = list(entries)
    scored = score_entries(entries, market_open_at, ScoreCalculator.from_config(config))
    allocator = TierAllocator(config.tier_fractions)

    frozen = len(entries) < config.min_participants
    if config.mode is PoolMode.PER_SUBMARKET:
        if frozen:
            gate = math.inf
        elif config.gate_scope is GateScope.PER_SUBMARKET:
            gate = config.min_participants
        else:
            gate = 0
        results = SubmarketPartitioner(allocator).allocate_aligned(scored, min_group_size=gate)
    else:
        results = allocator.allocate(scored, pool_size(scored), frozen=frozen)

    log.info(
        "market_resolved",
        entries=len(entries),
        mode=config.mode.value,
        pot=pool_size(scored),
        paid=sum(r.payout for r in results),
        frozen=frozen,
    )
    return results


class PoolSummary(BaseModel):
    submarket_key: str | None = None
    entry_count: int
    pot: float
    paid: float
    frozen: bool = False


class MarketSummary(BaseModel):
    """Pot and payout totals for a resolution run. frozen: every pool is frozen."""

    entry_count: int
    pot: float
    paid: float
    frozen: bool = False
    pools: list[PoolSummary] = Field(default_factory=list)

    @property
    def frozen_pools(self) -> list[str | None]:
        return [p.submarket_key for p in self.pools if p.frozen]


def summarize(results: Iterable[PayoutResult], mode: PoolMode = PoolMode.SINGLE) -> MarketSummary:
    """Totals per pool. In single-pool mode there is one pool with no submarket key."""
    results = list(results)
    pools: dict[str | None, list[PayoutResult]] = {}
    for r in results:
        key = r.submarket_key if mode is PoolMode.PER_SUBMARKET else None
        pools.setdefault(key, []).append(r)
    summaries = [
        PoolSummary(
            submarket_key=key,
            entry_count=len(members),
            pot=sum(r.stake for r in members),
            paid=sum(r.payout for r in members),
            frozen=all(r.frozen for r in members),
        )
        for key, members in pools.items()
    ]
    return MarketSummary(
        entry_count=len(results),
        pot=sum(r.stake for r in results),
        paid=sum(r.payout for r in results),
        frozen=bool(summaries) and all(p.frozen for p in summaries),
        pools=summaries,
    )


def sort_for_display(results: Iterable[PayoutResult]) -> list[PayoutResult]:
    """Best score first across all pools; ties by rank then entry id."""
    return sorted(results, key=lambda r: (-r.score, r.rank, r.entry_id))
