"""Subscription wiring for the demo fleet.

Registration order matters: the router calls a type's handlers in the
order they were subscribed, and the threshold detector must see the
level *after* the sale or refill was applied.  ``wire_fleet`` is the one
place that order is fixed.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass

import click

from vending_router.core.config import Settings
from vending_router.core.enums import EventType
from vending_router.domain.events import NOTIFICATION_EVENT_TYPES, STOCK_EVENT_TYPES
from vending_router.domain.machines import MachineStore
from vending_router.handlers.stock import MachineRefillSubscriber, MachineSaleSubscriber
from vending_router.handlers.stock_warning import StockWarningSubscriber
from vending_router.handlers.terminal import StockAlertPrinter
from vending_router.infrastructure.router import IEventRouter

logger = logging.getLogger(__name__)


@dataclass
class Fleet:
    """The subscribers ``wire_fleet`` registered."""

    sales: MachineSaleSubscriber
    refills: MachineRefillSubscriber
    warnings: StockWarningSubscriber
    printer: StockAlertPrinter


def wire_fleet(
    router: IEventRouter,
    store: MachineStore,
    settings: Settings | None = None,
    echo: Callable[[str], object] = click.echo,
) -> Fleet:
    """Create the fleet's subscribers and register them in dependency order."""
    settings = settings or Settings()

    fleet = Fleet(
        sales=MachineSaleSubscriber(store),
        refills=MachineRefillSubscriber(store),
        warnings=StockWarningSubscriber(store, threshold=settings.low_stock_threshold),
        printer=StockAlertPrinter(store, echo=echo),
    )

    # 1. Mutators first
    router.subscribe(EventType.SALE, fleet.sales)
    router.subscribe(EventType.REFILL, fleet.refills)

    # 2. Detector reads post-mutation levels
    for event_type in STOCK_EVENT_TYPES:
        router.subscribe(event_type, fleet.warnings)

    # 3. Leaf consumer of derived events
    for event_type in NOTIFICATION_EVENT_TYPES:
        router.subscribe(event_type, fleet.printer)

    logger.debug(
        "Wired fleet of %d machines (threshold=%d)",
        len(store), settings.low_stock_threshold,
    )
    return fleet
