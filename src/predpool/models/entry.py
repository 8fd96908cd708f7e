"""Entry, ScoredEntry, PayoutResult - canonical entities."""

from __future__ import annotations

from datetime import date, datetime, timezone

from pydantic import BaseModel, ConfigDict, Field, field_validator


def as_utc(value: datetime | None) -> datetime | None:
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class Entry(BaseModel):
    """One participant's prediction and stake for a market (or submarket)."""

    model_config = ConfigDict(frozen=True)

    id: str
    participant_id: str
    participant_name: str | None = None
    submarket_key: str | None = None  # e.g. guest/horse id; None in single-pool markets
    submarket_label: str | None = None  # e.g. horse name, used to match outcomes
    predicted_value: date
    actual_value: date | None = None  # None until the submarket is resolved
    stake: float = Field(..., gt=0, allow_inf_nan=False)
    submitted_at: datetime
    market_open_at: datetime | None = None

    @field_validator("id", "participant_id", mode="before")
    @classmethod
    def _coerce_id(cls, v: object) -> object:
        # Snapshot readers may hand over integer ids
        if isinstance(v, int):
            return str(v)
        return v

    @field_validator("submitted_at", "market_open_at")
    @classmethod
    def _utc(cls, v: datetime | None) -> datetime | None:
        return as_utc(v)

    @property
    def resolved(self) -> bool:
        return self.actual_value is not None


class ScoredEntry(BaseModel):
    """Entry plus its computed score. Built once, never mutated."""

    model_config = ConfigDict(frozen=True)

    entry: Entry
    score: float = Field(..., ge=0, allow_inf_nan=False)
    error: int | None = None  # whole-day prediction error; None when unresolved

    @property
    def id(self) -> str:
        return self.entry.id

    @property
    def stake(self) -> float:
        return self.entry.stake

    @property
    def submarket_key(self) -> str | None:
        return self.entry.submarket_key


class PayoutResult(BaseModel):
    """Score, payout and rank for one entry within its pool."""

    model_config = ConfigDict(frozen=True)

    entry_id: str
    participant_id: str
    submarket_key: str | None = None
    stake: float = Field(..., allow_inf_nan=False)
    score: float = Field(..., ge=0, allow_inf_nan=False)
    payout: float = Field(..., ge=0, allow_inf_nan=False)
    rank: int = Field(..., ge=1)
    net: float = 0.0  # payout - stake
    frozen: bool = False  # pool below the participant minimum, nothing paid
