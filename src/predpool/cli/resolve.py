"""Resolve subcommand: run, check."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path

import typer
from pydantic import ValidationError

from predpool.engine.resolver import resolve_market, sort_for_display, summarize
from predpool.models.config import GateScope, PoolMode, StakeWeight
from predpool.models.entry import Entry
from predpool.snapshot.io import export_results, load_entries
from predpool.snapshot.outcomes import apply_outcomes, missing_outcomes, outcomes_from_args, submarket_name

app = typer.Typer(help="Score a market snapshot and split the pot")


def _load(snapshot: Path, outcomes: list[str] | None) -> list[Entry]:
    """Load the snapshot and apply NAME=YYYY-MM-DD outcomes; exit 1 on bad input."""
    try:
        entries = load_entries(snapshot)
        parsed = outcomes_from_args(outcomes or [])
        return apply_outcomes(entries, parsed) if parsed else entries
    except (OSError, ValueError) as exc:
        typer.echo(f"Error: {exc}")
        raise typer.Exit(1)


def _parse_open(s: str | None) -> datetime | None:
    if s is None:
        return None
    try:
        return datetime.fromisoformat(s)
    except ValueError:
        typer.echo(f"Error: --open must be an ISO 8601 timestamp, got {s!r}")
        raise typer.Exit(1)


@app.command("run")
def run_resolve(
    ctx: typer.Context,
    snapshot: Path = typer.Argument(..., help="Entries snapshot (.csv, .parquet or .json)"),
    market_open: str | None = typer.Option(
        None, "--open", help="Market open time (ISO 8601). Default: each entry's market_open_at"
    ),
    outcome: list[str] | None = typer.Option(
        None, "--outcome", "-o", help="Resolved outcome NAME=YYYY-MM-DD (repeatable)"
    ),
    mode: PoolMode | None = typer.Option(None, "--mode", help="Single pool or one pool per submarket"),
    stake_weight: StakeWeight | None = typer.Option(None, "--stake-weight", help="Stake term of the score"),
    gate_scope: GateScope | None = typer.Option(None, "--gate-scope", help="Where the participant minimum applies"),
    min_participants: int | None = typer.Option(None, "--min-participants", help="Freeze pools below this size"),
    output: Path | None = typer.Option(None, "--output", help="Write results to .parquet or .csv"),
) -> None:
    """Score every entry and print the payout table."""
    settings = ctx.obj["settings"]
    entries = _load(snapshot, outcome)
    open_at = _parse_open(market_open)
    try:
        config = settings.resolution_config(
            mode=mode,
            stake_weight=stake_weight,
            gate_scope=gate_scope,
            min_participants=min_participants,
        )
    except ValidationError as exc:
        typer.echo(f"Invalid configuration: {exc}")
        raise typer.Exit(1)

    results = resolve_market(entries, open_at, config)
    by_id = {e.id: e for e in entries}
    typer.echo(f"  {'Rank':>4}  {'Participant':<16} {'Submarket':<12} {'Score':>9} {'Payout':>10} {'Net':>10}")
    for r in sort_for_display(results):
        e = by_id[r.entry_id]
        who = (e.participant_name or e.participant_id)[:16]
        market = (submarket_name(e) or "-")[:12]
        typer.echo(f"  {r.rank:>4}  {who:<16} {market:<12} {r.score:>9.2f} {r.payout:>10.2f} {r.net:>10.2f}")

    summary = summarize(results, config.mode)
    typer.echo(f"Entries: {summary.entry_count}  Pot: {summary.pot:.2f}  Paid: {summary.paid:.2f}")
    if summary.frozen:
        typer.echo(f"Pool frozen: minimum {config.min_participants} players required, have {summary.entry_count}.")
    elif summary.frozen_pools:
        names = ", ".join(k or "-" for k in summary.frozen_pools)
        typer.echo(f"Frozen submarkets (fewer than {config.min_participants} players): {names}")
    missing = missing_outcomes(entries)
    if missing:
        typer.echo(f"Still missing outcomes for: {', '.join(missing)} (scored 0)")
    if output:
        count = export_results(results, output)
        typer.echo(f"Wrote {count} results to {output}")


@app.command("check")
def check(
    snapshot: Path = typer.Argument(..., help="Entries snapshot (.csv, .parquet or .json)"),
    outcome: list[str] | None = typer.Option(
        None, "--outcome", "-o", help="Resolved outcome NAME=YYYY-MM-DD (repeatable)"
    ),
) -> None:
    """Report which submarkets still lack an outcome."""
    entries = _load(snapshot, outcome)
    missing = missing_outcomes(entries)
    typer.echo(f"Entries: {len(entries)}")
    if missing:
        typer.echo(f"Still missing outcomes for: {', '.join(missing)}")
        typer.echo("Market NOT fully resolved yet.")
    else:
        typer.echo("All submarkets resolved.")
