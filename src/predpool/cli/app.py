"""Root CLI app - entry point and command registration."""

from pathlib import Path

import typer

from predpool.config import get_settings
from predpool.config.settings import configure_logging

app = typer.Typer(
    name="predpool",
    help="PredPool - Score prediction pools and split the pot across payout tiers.",
    no_args_is_help=True,
)


@app.callback()
def main(
    ctx: typer.Context,
    config_dir: Path | None = typer.Option(
        None, "--config-dir", "-C", help="Config directory (default: ./config or package config)"
    ),
    profile: str | None = typer.Option(
        None, "--profile", "-p", help="Config profile (e.g. horses) to overlay on default.toml"
    ),
) -> None:
    """Configure logging and store options in context."""
    settings = get_settings(profile, config_dir)
    configure_logging(settings)
    ctx.obj = {"settings": settings, "config_dir": config_dir, "profile": profile}


# Subcommands registered from other modules
from predpool.cli import api_cmd, resolve  # noqa: E402

app.add_typer(resolve.app, name="resolve")
app.add_typer(api_cmd.app, name="api")


def run() -> None:
    app()


if __name__ == "__main__":
    run()
