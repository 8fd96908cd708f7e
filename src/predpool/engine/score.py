"""Per-entry score: stake weight, accuracy, and early-submission bonus."""

from __future__ import annotations

import math
from datetime import date, datetime

from predpool.models.config import ResolutionConfig, StakeWeight
from predpool.models.entry import Entry, ScoredEntry, as_utc

SECONDS_PER_HOUR = 3600.0
SECONDS_PER_DAY = 86400.0


def days_between(a: date, b: date) -> int:
    """Absolute difference in whole days. Datetimes are rounded half-up to the nearest day."""
    if isinstance(a, datetime) or isinstance(b, datetime):
        a, b = _to_datetime(a, b), _to_datetime(b, a)
        seconds = abs((a - b).total_seconds())
        return int(math.floor(seconds / SECONDS_PER_DAY + 0.5))
    return abs((a - b).days)


def _to_datetime(value: date, other: date) -> datetime:
    if isinstance(value, datetime):
        return value
    # Plain dates are midnight in the other side's zone
    return datetime(value.year, value.month, value.day, tzinfo=getattr(other, "tzinfo", None))


def prediction_error(entry: Entry) -> int | None:
    """Whole-day distance between prediction and outcome; None while unresolved."""
    if entry.actual_value is None:
        return None
    return days_between(entry.predicted_value, entry.actual_value)


class ScoreCalculator:
    """Turns one entry plus the market open time into a scalar score.

    score = stake_weight(stake) / (1 + error) * (1 + alpha * (1 - elapsed / window))

    where elapsed is the submission delay in days, clamped to [0, window].
    """

    __slots__ = ("window_days", "alpha", "stake_weight")

    def __init__(
        self,
        window_days: int = 28,
        alpha: float = 2.0,
        stake_weight: StakeWeight = StakeWeight.LINEAR,
    ) -> None:
        if window_days <= 0:
            raise ValueError(f"window_days must be positive, got {window_days}")
        if not math.isfinite(alpha) or alpha < 0:
            raise ValueError(f"alpha must be non-negative, got {alpha}")
        self.window_days = window_days
        self.alpha = alpha
        self.stake_weight = StakeWeight(stake_weight)

    @classmethod
    def from_config(cls, config: ResolutionConfig) -> ScoreCalculator:
        return cls(window_days=config.window_days, alpha=config.alpha, stake_weight=config.stake_weight)

    def weigh_stake(self, stake: float) -> float:
        if self.stake_weight is StakeWeight.SQRT:
            return math.sqrt(stake)
        return stake

    def elapsed_days(self, submitted_at: datetime, market_open_at: datetime) -> float:
        hours = (submitted_at - market_open_at).total_seconds() / SECONDS_PER_HOUR
        return min(max(hours / 24, 0.0), float(self.window_days))

    def timing_multiplier(self, submitted_at: datetime, market_open_at: datetime) -> float:
        elapsed = self.elapsed_days(submitted_at, market_open_at)
        return 1 + self.alpha * (1 - elapsed / self.window_days)

    def score(self, entry: Entry, market_open_at: datetime | None) -> float:
        """Score for one entry. 0 when the entry is unresolved or the open time is unknown."""
        error = prediction_error(entry)
        if error is None or market_open_at is None:
            return 0.0
        market_open_at = as_utc(market_open_at)
        multiplier = self.timing_multiplier(entry.submitted_at, market_open_at)
        return self.weigh_stake(entry.stake) / (1 + error) * multiplier

    def score_entry(self, entry: Entry, market_open_at: datetime | None) -> ScoredEntry:
        return ScoredEntry(
            entry=entry,
            score=self.score(entry, market_open_at),
            error=prediction_error(entry),
        )
