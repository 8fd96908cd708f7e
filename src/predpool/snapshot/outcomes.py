"""Apply resolved outcomes (NAME=YYYY-MM-DD) to a snapshot of entries."""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping, Sequence
from datetime import date

import structlog

from predpool.models.entry import Entry

log = structlog.get_logger(__name__)

_OUTCOME_RE = re.compile(r"^([^=]+)=(\d{4}-\d{2}-\d{2})$")


def parse_outcome_arg(arg: str) -> tuple[str, date]:
    """Parse 'Alex=2026-03-23' into ('Alex', date(2026, 3, 23))."""
    match = _OUTCOME_RE.match(arg.strip())
    if not match:
        raise ValueError(f'Bad outcome "{arg}": expected NAME=YYYY-MM-DD')
    return match.group(1).strip(), date.fromisoformat(match.group(2))


def outcomes_from_args(args: Iterable[str]) -> dict[str, date]:
    """Parse repeated NAME=YYYY-MM-DD arguments; one name given two dates raises ValueError."""
    outcomes: dict[str, date] = {}
    for arg in args:
        name, day = parse_outcome_arg(arg)
        if outcomes.get(name, day) != day:
            raise ValueError(f'Conflicting outcomes for submarket "{name}"')
        outcomes[name] = day
    return outcomes


def submarket_name(entry: Entry) -> str | None:
    return entry.submarket_label or entry.submarket_key


def _aliases(entry: Entry) -> set[str]:
    return {n.lower() for n in (entry.submarket_label, entry.submarket_key) if n}


def apply_outcomes(entries: Sequence[Entry], outcomes: Mapping[str, date]) -> list[Entry]:
    """Return new entries with actual_value set for each named submarket.

    Names match a submarket label or key, case-insensitively. Unknown names, or two names for one
    submarket with different dates, raise ValueError.
    """
    known: dict[str, str] = {}
    for e in entries:
        for alias in _aliases(e):
            known.setdefault(alias, submarket_name(e) or alias)
    lookup: dict[str, date] = {}
    for name, day in outcomes.items():
        if name.lower() not in known:
            names = ", ".join(sorted(set(known.values()))) or "(none)"
            raise ValueError(f'Submarket "{name}" not found. Known submarkets: {names}')
        if lookup.get(name.lower(), day) != day:
            raise ValueError(f'Conflicting outcomes for submarket "{name}"')
        lookup[name.lower()] = day

    updated: list[Entry] = []
    for e in entries:
        days = {lookup[a] for a in _aliases(e) if a in lookup}
        if len(days) > 1:
            listed = ", ".join(sorted(d.isoformat() for d in days))
            raise ValueError(f'Conflicting outcomes for submarket "{submarket_name(e)}": {listed}')
        day = days.pop() if days else None
        updated.append(e.model_copy(update={"actual_value": day}) if day is not None else e)
    for name, day in outcomes.items():
        log.info("outcome_applied", submarket=name, actual=day.isoformat())
    return updated


def missing_outcomes(entries: Sequence[Entry]) -> list[str]:
    """Submarkets (by label, else key) with at least one unresolved entry."""
    return sorted({submarket_name(e) or "(market)" for e in entries if not e.resolved})
