"""Read entry snapshots (CSV, Parquet, JSON) and write results via DuckDB."""

from __future__ import annotations

import json
from collections.abc import Iterable
from pathlib import Path
from typing import Any

import duckdb
import structlog
from pydantic import ValidationError

from predpool.models.entry import Entry, PayoutResult

log = structlog.get_logger(__name__)

RESULTS_SQL = """
CREATE TABLE results (
    entry_id        VARCHAR NOT NULL,
    participant_id  VARCHAR NOT NULL,
    submarket_key   VARCHAR,
    stake           DOUBLE NOT NULL,
    score           DOUBLE NOT NULL,
    payout          DOUBLE NOT NULL,
    "rank"          INTEGER NOT NULL,
    net             DOUBLE NOT NULL
)
"""


def _sql_path(path: Path) -> str:
    return str(path.resolve()).replace("'", "''")


def _read_with_duckdb(path: Path) -> list[dict[str, Any]]:
    if path.suffix.lower() == ".csv":
        # Text columns only; pydantic does the typing so bad dates fail with a clear message
        query = f"SELECT * FROM read_csv('{_sql_path(path)}', header = true, all_varchar = true)"
    else:
        query = f"SELECT * FROM read_parquet('{_sql_path(path)}')"
    conn = duckdb.connect()
    try:
        cur = conn.execute(query)
        columns = [d[0] for d in cur.description]
        return [dict(zip(columns, row)) for row in cur.fetchall()]
    finally:
        conn.close()


def _read_json(path: Path) -> list[dict[str, Any]]:
    with open(path, encoding="utf-8") as f:
        data = json.load(f)
    if isinstance(data, dict):
        data = data.get("entries", [])
    if not isinstance(data, list):
        raise ValueError(f"{path.name}: expected a list of entries")
    return data


def _clean_row(row: dict[str, Any]) -> dict[str, Any]:
    return {k: (None if isinstance(v, str) and not v.strip() else v) for k, v in row.items()}


def load_entries(path: str | Path) -> list[Entry]:
    """Load and validate a snapshot of entries. Raises ValueError on bad rows or duplicate ids."""
    path = Path(path)
    suffix = path.suffix.lower()
    if suffix == ".json":
        rows = _read_json(path)
    elif suffix in (".csv", ".parquet"):
        rows = _read_with_duckdb(path)
    else:
        raise ValueError(f"Unsupported snapshot format: {path.suffix or path.name} (use .csv, .parquet or .json)")

    entries: list[Entry] = []
    seen: set[str] = set()
    for n, row in enumerate(rows, start=1):
        try:
            entry = Entry.model_validate(_clean_row(row))
        except ValidationError as exc:
            raise ValueError(f"{path.name} row {n}: {exc}") from exc
        if entry.id in seen:
            raise ValueError(f"{path.name} row {n}: duplicate entry id {entry.id!r}")
        seen.add(entry.id)
        entries.append(entry)
    log.debug("snapshot_loaded", path=str(path), entries=len(entries))
    return entries


def export_results(results: Iterable[PayoutResult], output_path: str | Path) -> int:
    """Write results to Parquet (default) or CSV by file suffix. Returns row count."""
    path = Path(output_path).resolve()
    path.parent.mkdir(parents=True, exist_ok=True)
    rows = [
        [r.entry_id, r.participant_id, r.submarket_key, r.stake, r.score, r.payout, r.rank, r.net]
        for r in results
    ]
    fmt = "CSV, HEADER" if path.suffix.lower() == ".csv" else "PARQUET"
    conn = duckdb.connect()
    try:
        conn.execute(RESULTS_SQL)
        if rows:
            conn.executemany("INSERT INTO results VALUES (?, ?, ?, ?, ?, ?, ?, ?)", rows)
        conn.execute(f"COPY results TO '{_sql_path(path)}' (FORMAT {fmt})")
    finally:
        conn.close()
    log.debug("results_exported", path=str(path), rows=len(rows))
    return len(rows)
