"""Layered TOML settings (default.toml + profile overlay) and structlog setup."""

from __future__ import annotations

import logging
import sys
import tomllib
from pathlib import Path
from typing import Any

import structlog

from predpool.models.config import ResolutionConfig

# Searched in order when no --config-dir is given: ./config, then the repo's config/
_SEARCH_DIRS = (
    Path.cwd() / "config",
    Path(__file__).resolve().parent.parent.parent.parent / "config",
)
_SECTIONS = ("pool", "scoring", "api", "logging")


def _read_layer(path: Path) -> dict[str, Any]:
    if not path.is_file():
        return {}
    with open(path, "rb") as f:
        return tomllib.load(f)


def _overlay(base: dict[str, Any], layer: dict[str, Any]) -> dict[str, Any]:
    """Tables merge key by key; any other value in the layer replaces the base value."""
    merged = dict(base)
    for key, value in layer.items():
        current = merged.get(key)
        merged[key] = _overlay(current, value) if isinstance(current, dict) and isinstance(value, dict) else value
    return merged


def config_dir_for(config_dir: Path | None = None) -> Path:
    if config_dir is not None:
        return config_dir
    return next((d for d in _SEARCH_DIRS if d.exists()), _SEARCH_DIRS[-1])


def load_config(profile: str | None = None, config_dir: Path | None = None) -> dict[str, Any]:
    """default.toml, then <profile>.toml on top. A missing default means built-in defaults only."""
    directory = config_dir_for(config_dir)
    default = directory / "default.toml"
    if not default.is_file():
        return {}
    layers = [default] + ([directory / f"{profile}.toml"] if profile else [])
    raw: dict[str, Any] = {}
    for path in layers:
        raw = _overlay(raw, _read_layer(path))
    return raw


def get_settings(profile: str | None = None, config_dir: Path | None = None) -> Settings:
    return Settings.from_dict(load_config(profile, config_dir))


class Settings:
    """Application settings from TOML config."""

    def __init__(
        self,
        *,
        pool: dict[str, Any] | None = None,
        scoring: dict[str, Any] | None = None,
        api: dict[str, Any] | None = None,
        logging: dict[str, Any] | None = None,
    ):
        self.pool = pool or {}
        self.scoring = scoring or {}
        self.api = api or {}
        self.logging = logging or {}

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> Settings:
        return cls(**{section: raw.get(section) for section in _SECTIONS})

    # Convenience accessors with defaults
    @property
    def min_participants(self) -> int:
        return int(self.pool.get("min_participants", 3))

    @property
    def mode(self) -> str:
        return self.pool.get("mode", "single")

    @property
    def gate_scope(self) -> str:
        return self.pool.get("gate_scope", "global")

    @property
    def tier_fractions(self) -> list[float]:
        return [float(f) for f in self.pool.get("tier_fractions", [0.75, 0.25])]

    @property
    def window_days(self) -> int:
        return int(self.scoring.get("window_days", 28))

    @property
    def alpha(self) -> float:
        return float(self.scoring.get("alpha", 2.0))

    @property
    def stake_weight(self) -> str:
        return self.scoring.get("stake_weight", "linear")

    @property
    def api_host(self) -> str:
        return self.api.get("host", "127.0.0.1")

    @property
    def api_port(self) -> int:
        return int(self.api.get("port", 8000))

    @property
    def logging_level(self) -> str:
        return self.logging.get("level", "INFO").upper()

    @property
    def logging_format(self) -> str:
        return self.logging.get("format", "console")

    @property
    def logging_level_num(self) -> int:
        return getattr(logging, self.logging_level, logging.INFO)

    def resolution_config(self, **overrides: Any) -> ResolutionConfig:
        """Validated engine config; non-None overrides replace configured values."""
        values: dict[str, Any] = {
            "min_participants": self.min_participants,
            "mode": self.mode,
            "gate_scope": self.gate_scope,
            "tier_fractions": self.tier_fractions,
            "window_days": self.window_days,
            "alpha": self.alpha,
            "stake_weight": self.stake_weight,
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        return ResolutionConfig(**values)


def _renderer(fmt: str) -> Any:
    if fmt == "json":
        return structlog.processors.JSONRenderer(sort_keys=True)
    if fmt == "console":
        return structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())
    raise ValueError(f"Unknown logging format {fmt!r} (use console or json)")


def configure_logging(settings: Settings) -> None:
    """Send structlog events to stderr at the configured level. Call once at application entry.

    The stream is looked up on every call so command output on stdout stays clean
    and test runners that swap sys.stderr see the events.
    """
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.format_exc_info,
            _renderer(settings.logging_format),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(settings.logging_level_num),
        context_class=dict,
        logger_factory=lambda *args: structlog.PrintLogger(sys.stderr),
        cache_logger_on_first_use=False,
    )
