"""CLI entry point for the vending fleet router."""

from __future__ import annotations

import json

import click
from pydantic import ValidationError

from .core.errors import VendingError


@click.group()
def main() -> None:
    """Vending fleet event router."""


@main.command()
@click.option("--config", default=None, help="Config file path (TOML)")
@click.option("--events", "event_count", default=None, type=int, help="Number of random events")
@click.option("--seed", default=None, type=int, help="Random seed for a repeatable run")
@click.option("--threshold", default=None, type=int, help="Low-stock threshold override")
def simulate(
    config: str | None,
    event_count: int | None,
    seed: int | None,
    threshold: int | None,
) -> None:
    """Publish random sale/refill events through the fleet."""
    from .main import build_settings, configure_logging, run

    overrides: dict = {}
    if event_count is not None:
        overrides.setdefault("simulation", {})["event_count"] = event_count
    if seed is not None:
        overrides.setdefault("simulation", {})["seed"] = seed
    if threshold is not None:
        overrides["low_stock_threshold"] = threshold

    try:
        settings = build_settings(config_path=config, overrides=overrides)
    except (ValidationError, VendingError) as exc:
        raise click.ClickException(str(exc)) from exc

    configure_logging(settings)
    result = run(settings)

    click.echo("")
    click.echo(f"{'Machine':<10}{'Stock':>6}")
    for machine_id, level in result.final_stock.items():
        click.echo(f"{machine_id:<10}{level:>6}")


@main.command("config")
@click.option("--config", default=None, help="Config file path (TOML)")
def show_config(config: str | None) -> None:
    """Print the effective settings as JSON."""
    from .main import build_settings

    try:
        settings = build_settings(config_path=config)
    except (ValidationError, VendingError) as exc:
        raise click.ClickException(str(exc)) from exc

    click.echo(json.dumps(settings.model_dump(mode="json"), indent=2))
