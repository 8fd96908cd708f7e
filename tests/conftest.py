"""Shared entry factories."""

from datetime import date, datetime, timedelta, timezone

import pytest

from predpool.models.entry import Entry, ScoredEntry

OPEN = datetime(2026, 3, 1, tzinfo=timezone.utc)


def build_entry(
    entry_id: str,
    stake: float = 50,
    error_days: int | None = 2,
    submitted_after_days: float = 0,
    submarket_key: str | None = None,
    **extra,
) -> Entry:
    predicted = date(2026, 3, 20)
    actual = None if error_days is None else predicted + timedelta(days=error_days)
    return Entry(
        id=entry_id,
        participant_id=f"user-{entry_id}",
        submarket_key=submarket_key,
        predicted_value=predicted,
        actual_value=actual,
        stake=stake,
        submitted_at=OPEN + timedelta(days=submitted_after_days),
        market_open_at=OPEN,
        **extra,
    )


@pytest.fixture
def make_entry():
    return build_entry


@pytest.fixture
def make_scored():
    def _make(entry_id: str, score: float, stake: float = 10, error: int | None = 0, submarket_key: str | None = None):
        entry = build_entry(entry_id, stake=stake, error_days=error, submarket_key=submarket_key)
        return ScoredEntry(entry=entry, score=score, error=error)

    return _make
