"""FastAPI wrapper over resolve_market."""

from __future__ import annotations

from pathlib import Path

import structlog
from fastapi import FastAPI
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from predpool import __version__
from predpool.api.schemas import ErrorResponse, HealthResponse, ResolveRequest, ResolveResponse
from predpool.config import get_settings
from predpool.engine.resolver import resolve_market, summarize

log = structlog.get_logger(__name__)

# Set by run_api() so request handlers read the same config as the CLI.
_config_profile: str | None = None
_config_dir: Path | None = None

app = FastAPI(title="PredPool API", version=__version__)


def _error_json(code: str, message: str, status_code: int = 400) -> JSONResponse:
    """Return consistent error JSON: { detail, code }."""
    return JSONResponse(
        status_code=status_code,
        content={"detail": message, "code": code},
    )


@app.get("/health", response_model=HealthResponse)
def health() -> HealthResponse:
    return HealthResponse(status="ok")


@app.post(
    "/resolve",
    response_model=ResolveResponse,
    responses={400: {"model": ErrorResponse}},
)
def resolve(body: ResolveRequest):
    """Score entries and split the pot. Results follow the request's entry order."""
    settings = get_settings(_config_profile, _config_dir)
    overrides = body.config.model_dump() if body.config else {}
    try:
        config = settings.resolution_config(**overrides)
    except ValidationError as exc:
        return _error_json("invalid_config", str(exc))
    results = resolve_market(body.entries, body.market_open_at, config)
    log.info("api_resolve", entries=len(body.entries), mode=config.mode.value)
    return ResolveResponse(results=results, summary=summarize(results, config.mode))


def run_api(
    host: str = "127.0.0.1",
    port: int = 8000,
    profile: str | None = None,
    config_dir: Path | None = None,
) -> None:
    global _config_profile, _config_dir
    _config_profile = profile
    _config_dir = config_dir
    import uvicorn

    uvicorn.run("predpool.api.main:app", host=host, port=port, reload=False)
