"""Per-submarket allocation: each submarket is an independent pool funded by its own stakes."""

from __future__ import annotations

from collections.abc import Sequence

import structlog

from predpool.engine.tiers import TierAllocator
from predpool.models.entry import PayoutResult, ScoredEntry

log = structlog.get_logger(__name__)


def group_by_submarket(scored_entries: Sequence[ScoredEntry]) -> dict[str | None, list[int]]:
    """Map submarket key -> input indices, keys in first-seen order, indices in input order."""
    groups: dict[str | None, list[int]] = {}
    for i, s in enumerate(scored_entries):
        groups.setdefault(s.submarket_key, []).append(i)
    return groups


def pool_size(scored_entries: Sequence[ScoredEntry]) -> float:
    return sum(s.stake for s in scored_entries)


class SubmarketPartitioner:
    """Runs a TierAllocator independently per submarket group.

    An entry's payout depends only on the entries sharing its submarket key;
    entries without a key form one group of their own.
    """

    def __init__(self, allocator: TierAllocator) -> None:
        self.allocator = allocator

    def allocate_grouped(self, scored_entries: Sequence[ScoredEntry]) -> list[PayoutResult]:
        """Results concatenated group by group, in first-seen group order."""
        aligned = self.allocate_aligned(scored_entries)
        return [aligned[i] for indices in group_by_submarket(scored_entries).values() for i in indices]

    def allocate_aligned(
        self, scored_entries: Sequence[ScoredEntry], min_group_size: float = 0
    ) -> list[PayoutResult]:
        """Results aligned with the input order. Groups smaller than min_group_size are frozen (pot 0)."""
        results: list[PayoutResult | None] = [None] * len(scored_entries)
        for key, indices in group_by_submarket(scored_entries).items():
            group = [scored_entries[i] for i in indices]
            frozen = len(group) < min_group_size
            pot = pool_size(group)
            if frozen:
                log.info("submarket_frozen", submarket=key, entries=len(group), min_participants=min_group_size)
            log.debug("submarket_allocate", submarket=key, entries=len(group), pot=pot)
            for i, result in zip(indices, self.allocator.allocate(group, pot, frozen=frozen)):
                results[i] = result
        return results  # type: ignore[return-value]
