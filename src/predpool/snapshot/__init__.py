"""Snapshot boundary: load entries, apply outcomes, export results."""

from predpool.snapshot.io import export_results, load_entries
from predpool.snapshot.outcomes import apply_outcomes, missing_outcomes, outcomes_from_args, parse_outcome_arg

__all__ = [
    "load_entries",
    "export_results",
    "apply_outcomes",
    "missing_outcomes",
    "outcomes_from_args",
    "parse_outcome_arg",
]
