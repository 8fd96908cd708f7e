"""Tiered pot allocation with tie cascading across payout tiers."""

from __future__ import annotations

import math
from collections.abc import Sequence

import structlog

from predpool.models.config import validate_tier_fractions
from predpool.models.entry import PayoutResult, ScoredEntry

log = structlog.get_logger(__name__)


def ranking_key(scored: ScoredEntry) -> tuple[float, float, float]:
    """Sort key: score desc, then stake desc, then prediction error asc (unresolved last).

    Entries equal on all three keep their input order (sorted() is stable); they
    still share a payout because tie groups are formed on score alone.
    """
    error = math.inf if scored.error is None else float(scored.error)
    return (-scored.score, -scored.stake, error)


class TierAllocator:
    """Splits a pot over ranked entries using a fixed fractional tier schedule.

    A run of entries with the exact same score consumes as many tiers as it has
    members (or all remaining tiers, if fewer), pools those fractions, and splits
    the pooled award evenly. Entries past the last tier receive nothing.
    """

    __slots__ = ("tier_fractions",)

    def __init__(self, tier_fractions: Sequence[float] = (0.75, 0.25)) -> None:
        self.tier_fractions: tuple[float, ...] = tuple(validate_tier_fractions(list(tier_fractions)))

    def allocate(
        self, scored_entries: Sequence[ScoredEntry], pot: float, frozen: bool = False
    ) -> list[PayoutResult]:
        """Return one PayoutResult per entry, aligned with the input order.

        A frozen pool is ranked as usual but pays nothing.
        """
        if pot < 0:
            raise ValueError(f"pot must be non-negative, got {pot}")
        if frozen:
            pot = 0.0
        n = len(scored_entries)
        if n == 0:
            return []
        order = sorted(range(n), key=lambda i: ranking_key(scored_entries[i]))
        payouts = [0.0] * n
        ranks = [0] * n

        tiers = self.tier_fractions
        tier_index = 0
        entry_index = 0
        while entry_index < n:
            group_score = scored_entries[order[entry_index]].score
            group_end = entry_index
            while group_end < n and scored_entries[order[group_end]].score == group_score:
                group_end += 1
            group = order[entry_index:group_end]

            if tier_index < len(tiers):
                consumed = min(len(group), len(tiers) - tier_index)
                award = sum(tiers[tier_index : tier_index + consumed]) * pot
                each = award / len(group)
                for i in group:
                    payouts[i] = each
                tier_index += consumed

            # Competition ranking: the group shares the position of its first member
            for i in group:
                ranks[i] = entry_index + 1
            entry_index = group_end

        log.debug("tiers_allocated", entries=n, pot=pot, tiers_used=tier_index)
        return [
            PayoutResult(
                entry_id=s.entry.id,
                participant_id=s.entry.participant_id,
                submarket_key=s.entry.submarket_key,
                stake=s.stake,
                score=s.score,
                payout=payouts[i],
                rank=ranks[i],
                net=payouts[i] - s.stake,
                frozen=frozen,
            )
            for i, s in enumerate(scored_entries)
        ]
