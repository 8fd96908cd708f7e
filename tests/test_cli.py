"""CLI: resolve run / check."""

import pytest
from typer.testing import CliRunner

from predpool.cli.app import app

from test_snapshot import CSV

runner = CliRunner()


@pytest.fixture
def env(tmp_path):
    cfg = tmp_path / "config"
    cfg.mkdir()
    (cfg / "default.toml").write_text('[logging]\nlevel = "WARNING"\n')
    snapshot = tmp_path / "entries.csv"
    snapshot.write_text(CSV)
    return cfg, snapshot


def _run(cfg, *args):
    return runner.invoke(app, ["--config-dir", str(cfg), *args])


def test_resolve_run(env, tmp_path):
    cfg, snapshot = env
    out = tmp_path / "results.csv"
    result = _run(
        cfg, "resolve", "run", str(snapshot),
        "-o", "Alex=2026-03-23", "-o", "bryan=2026-05-21", "--output", str(out),
    )
    assert result.exit_code == 0, result.output
    assert "Pot: 100.00  Paid: 100.00" in result.output
    assert "75.00" in result.output
    assert "Wrote 3 results" in result.output
    assert "missing" not in result.output
    assert out.exists()


def test_resolve_run_partial_and_frozen(env):
    cfg, snapshot = env
    result = _run(cfg, "resolve", "run", str(snapshot), "-o", "Alex=2026-03-23", "--min-participants", "5")
    assert result.exit_code == 0, result.output
    assert "Pool frozen: minimum 5 players required, have 3." in result.output
    assert "Still missing outcomes for: Bryan" in result.output
    assert "Paid: 0.00" in result.output


def test_resolve_run_per_submarket(env):
    cfg, snapshot = env
    result = _run(
        cfg, "resolve", "run", str(snapshot), "-o", "Alex=2026-03-23", "-o", "Bryan=2026-05-21",
        "--mode", "per_submarket", "--min-participants", "1",
    )
    assert result.exit_code == 0, result.output
    # Alex pool: 70 (p1 52.50, p3 17.50); Bryan pool: 30 (p2 22.50)
    assert "52.50" in result.output
    assert "22.50" in result.output


def test_resolve_run_bad_outcome(env):
    cfg, snapshot = env
    result = _run(cfg, "resolve", "run", str(snapshot), "-o", "Troy=2026-06-01")
    assert result.exit_code == 1
    assert 'Submarket "Troy" not found' in result.output


def test_resolve_run_bad_open(env):
    cfg, snapshot = env
    result = _run(cfg, "resolve", "run", str(snapshot), "--open", "soon")
    assert result.exit_code == 1
    assert "--open must be an ISO 8601 timestamp" in result.output


def test_resolve_check(env):
    cfg, snapshot = env
    result = _run(cfg, "resolve", "check", str(snapshot), "-o", "Alex=2026-03-23")
    assert result.exit_code == 0
    assert "Still missing outcomes for: Bryan" in result.output
    assert "NOT fully resolved" in result.output
    done = _run(cfg, "resolve", "check", str(snapshot), "-o", "Alex=2026-03-23", "-o", "Bryan=2026-05-21")
    assert "All submarkets resolved." in done.output


def test_resolve_run_reports_frozen_submarkets(env):
    cfg, snapshot = env
    result = _run(
        cfg, "resolve", "run", str(snapshot), "-o", "Alex=2026-03-23", "-o", "Bryan=2026-05-21",
        "--mode", "per_submarket", "--gate-scope", "per_submarket", "--min-participants", "2",
    )
    assert result.exit_code == 0, result.output
    assert "Frozen submarkets (fewer than 2 players): g2" in result.output
    assert "Pool frozen" not in result.output
    assert "Paid: 70.00" in result.output


def test_resolve_run_conflicting_outcomes(env):
    cfg, snapshot = env
    result = _run(cfg, "resolve", "run", str(snapshot), "-o", "Alex=2026-03-23", "-o", "Alex=2026-03-24")
    assert result.exit_code == 1
    assert "Conflicting outcomes" in result.output
