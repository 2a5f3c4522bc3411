"""Application bootstrap.

Wires a store, a router and the fleet subscribers together, then feeds
the router a batch of generated events.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import click

from .core.config import Settings, load_settings
from .domain.events import MachineEvent, NOTIFICATION_EVENT_TYPES, StockEvent
from .domain.machines import MachineStore
from .infrastructure.router import EventRouter
from .observability.logger import setup_logging
from .simulation.fleet import wire_fleet
from .simulation.generator import EventGenerator

logger = logging.getLogger(__name__)


@dataclass
class SimulationResult:
    """Outcome of one demo run."""

    published: list[StockEvent] = field(default_factory=list)
    notifications: list[MachineEvent] = field(default_factory=list)
    final_stock: dict[str, int] = field(default_factory=dict)


def build_settings(
    config_path: str | Path | None = None,
    overrides: dict[str, Any] | None = None,
) -> Settings:
    """Load settings and reject fleets that cannot be seeded."""
    settings = load_settings(config_path=config_path, overrides=overrides)
    settings.validate_fleet()
    return settings


def run(
    settings: Settings | None = None,
    echo: Callable[[str], object] = click.echo,
) -> SimulationResult:
    """Seed the fleet, publish ``simulation.event_count`` events, report."""
    settings = settings or build_settings()
    settings.validate_fleet()

    store = MachineStore.with_machines(settings.machine_ids, settings.initial_stock)
    router = EventRouter()
    wire_fleet(router, store, settings, echo=echo)

    result = SimulationResult()
    for event_type in NOTIFICATION_EVENT_TYPES:
        router.subscribe(event_type, result.notifications.append)

    generator = EventGenerator(settings.machine_ids, settings.simulation)
    for event in generator.generate(settings.simulation.event_count):
        router.publish(event)
        result.published.append(event)

    result.final_stock = store.snapshot()
    logger.info(
        "Simulation finished: %d events, %d notifications, %d handler calls",
        len(result.published), len(result.notifications), router.dispatched_count,
    )
    return result


def configure_logging(settings: Settings) -> None:
    setup_logging(
        level=settings.observability.log_level,
        format=settings.observability.log_format,
    )
