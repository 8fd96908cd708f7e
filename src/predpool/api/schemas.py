"""Pydantic schemas for API request/response consistency and OpenAPI docs."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from predpool.engine.resolver import MarketSummary
from predpool.models.config import GateScope, PoolMode, StakeWeight
from predpool.models.entry import Entry, PayoutResult


# --- Health ---
class HealthResponse(BaseModel):
    status: str = "ok"


# --- Error (consistent shape for 4xx/5xx) ---
class ErrorResponse(BaseModel):
    detail: str = Field(..., description="Human-readable message")
    code: str | None = Field(None, description="Machine-readable code, e.g. invalid_config")


# --- Resolve ---
class ConfigOverrides(BaseModel):
    """Partial ResolutionConfig; unset fields fall back to server config."""

    min_participants: int | None = None
    mode: PoolMode | None = None
    gate_scope: GateScope | None = None
    tier_fractions: list[float] | None = None
    window_days: int | None = None
    alpha: float | None = None
    stake_weight: StakeWeight | None = None


class ResolveRequest(BaseModel):
    entries: list[Entry]
    market_open_at: datetime | None = Field(
        None, description="Market open time; defaults to each entry's market_open_at"
    )
    config: ConfigOverrides | None = None


class ResolveResponse(BaseModel):
    results: list[PayoutResult]
    summary: MarketSummary
