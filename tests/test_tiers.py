"""Tier allocation and tie cascade tests."""

import pytest

from predpool.engine.tiers import TierAllocator, ranking_key


def test_rank1_then_tie_splits_remaining_tier(make_scored):
    entries = [make_scored("a", 10), make_scored("b", 8), make_scored("c", 8)]
    results = TierAllocator([0.75, 0.25]).allocate(entries, 100)
    assert [r.payout for r in results] == [75.0, 12.5, 12.5]
    assert [r.rank for r in results] == [1, 2, 2]


def test_three_way_tie_pools_all_tiers(make_scored):
    entries = [make_scored("a", 5), make_scored("b", 5), make_scored("c", 5), make_scored("d", 4)]
    results = TierAllocator([0.75, 0.25]).allocate(entries, 99)
    assert [r.payout for r in results[:3]] == [pytest.approx(33.0)] * 3
    assert results[3].payout == 0
    assert results[3].rank == 4


def test_two_equal_entries_split_whole_pot(make_scored):
    entries = [make_scored("a", 50, stake=50, error=2), make_scored("b", 50, stake=50, error=2)]
    results = TierAllocator([0.75, 0.25]).allocate(entries, 100)
    assert results[0].payout == results[1].payout == 50.0
    assert results[0].net == 0.0


def test_results_follow_input_order(make_scored):
    entries = [make_scored("low", 1), make_scored("high", 9), make_scored("mid", 5)]
    results = TierAllocator([0.5, 0.3, 0.2]).allocate(entries, 10)
    assert [r.entry_id for r in results] == ["low", "high", "mid"]
    assert [r.payout for r in results] == pytest.approx([2.0, 5.0, 3.0])
    assert [r.rank for r in results] == [3, 1, 2]


def test_tie_in_middle_consumes_consecutive_tiers(make_scored):
    entries = [make_scored("a", 9), make_scored("b", 7), make_scored("c", 7), make_scored("d", 3)]
    results = TierAllocator([0.5, 0.3, 0.2]).allocate(entries, 100)
    assert [r.payout for r in results] == pytest.approx([50.0, 25.0, 25.0, 0.0])
    assert [r.rank for r in results] == [1, 2, 2, 4]


def test_conservation(make_scored):
    entries = [make_scored(str(i), float(i % 4)) for i in range(10)]
    full = TierAllocator([0.6, 0.3, 0.1]).allocate(entries, 250)
    assert sum(r.payout for r in full) == pytest.approx(250)
    partial = TierAllocator([0.5, 0.2]).allocate(entries, 250)
    assert sum(r.payout for r in partial) <= 250


def test_fewer_entries_than_tiers_pays_less_than_pot(make_scored):
    results = TierAllocator([0.75, 0.25]).allocate([make_scored("a", 3)], 40)
    assert results[0].payout == 30.0


def test_zero_pot_and_empty_input(make_scored):
    allocator = TierAllocator()
    assert allocator.allocate([], 100) == []
    results = allocator.allocate([make_scored("a", 3), make_scored("b", 1)], 0)
    assert [r.payout for r in results] == [0.0, 0.0]
    with pytest.raises(ValueError):
        allocator.allocate([make_scored("a", 3)], -1)


@pytest.mark.parametrize(
    "fractions", [[], [0.8, 0.3], [1.2], [-0.1, 0.5], [float("nan")], [0.5, float("nan")], [float("inf")]]
)
def test_invalid_schedules_rejected_at_construction(fractions):
    with pytest.raises(ValueError):
        TierAllocator(fractions)


def test_ranking_key_tie_breaks(make_scored):
    big_stake = make_scored("big", 5, stake=20, error=3)
    small_stake = make_scored("small", 5, stake=10, error=0)
    close = make_scored("close", 5, stake=10, error=1)
    unresolved = make_scored("unresolved", 5, stake=10, error=None)
    order = sorted([unresolved, close, small_stake, big_stake], key=ranking_key)
    assert [s.id for s in order] == ["big", "small", "close", "unresolved"]


def test_equal_score_different_stake_still_share(make_scored):
    results = TierAllocator([0.75, 0.25]).allocate(
        [make_scored("a", 4, stake=10), make_scored("b", 4, stake=30)], 40
    )
    assert results[0].payout == results[1].payout == 20.0


def test_frozen_pool_ranks_but_pays_nothing(make_scored):
    results = TierAllocator([0.75, 0.25]).allocate([make_scored("a", 2), make_scored("b", 6)], 20, frozen=True)
    assert [r.payout for r in results] == [0.0, 0.0]
    assert [r.rank for r in results] == [2, 1]
    assert all(r.frozen for r in results)
    assert not any(r.frozen for r in TierAllocator().allocate([make_scored("a", 2)], 20))
