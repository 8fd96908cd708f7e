"""ResolutionConfig - engine configuration surface, validated at construction."""

from __future__ import annotations

import math
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Float slack when checking that tier fractions do not exceed the whole pot
FRACTION_TOLERANCE = 1e-9


class PoolMode(str, Enum):
    SINGLE = "single"
    PER_SUBMARKET = "per_submarket"


class StakeWeight(str, Enum):
    LINEAR = "linear"
    SQRT = "sqrt"


class GateScope(str, Enum):
    GLOBAL = "global"
    PER_SUBMARKET = "per_submarket"


def validate_tier_fractions(fractions: list[float]) -> list[float]:
    """Reject an empty schedule, fractions outside [0, 1], or a schedule paying out more than the pot."""
    if not fractions:
        raise ValueError("tier_fractions must contain at least one tier")
    for f in fractions:
        if not math.isfinite(f) or f < 0 or f > 1:
            raise ValueError(f"tier fraction {f} outside [0, 1]")
    total = sum(fractions)
    if total > 1 + FRACTION_TOLERANCE:
        raise ValueError(f"tier_fractions sum to {total:.6f}, more than the whole pot")
    return list(fractions)


class ResolutionConfig(BaseModel):
    """How a resolved market is scored and paid out. Defaults match the standard game."""

    model_config = ConfigDict(frozen=True)

    min_participants: int = Field(3, ge=0)
    mode: PoolMode = PoolMode.SINGLE
    gate_scope: GateScope = GateScope.GLOBAL
    tier_fractions: list[float] = Field(default_factory=lambda: [0.75, 0.25])
    window_days: int = Field(28, gt=0, description="Betting window length in days")
    alpha: float = Field(2.0, ge=0, allow_inf_nan=False, description="Weight of the early-submission bonus")
    stake_weight: StakeWeight = StakeWeight.LINEAR

    @field_validator("tier_fractions")
    @classmethod
    def _check_tiers(cls, v: list[float]) -> list[float]:
        return validate_tier_fractions(v)
