"""Terminal output for low-stock and stock-ok notifications."""

from __future__ import annotations

from collections.abc import Callable

import click

from vending_router.core.enums import EventType
from vending_router.domain.events import MachineEvent
from vending_router.domain.machines import MachineStore

_TEMPLATES: dict[EventType, str] = {
    EventType.LOW_STOCK: "[LOW STOCK] Machine {machine_id}: stock={level}",
    EventType.STOCK_OK: "[STOCK OK]  Machine {machine_id}: stock={level}",
}


class StockAlertPrinter:
    """Writes one line per notification, using the machine's current level."""

    def __init__(
        self,
        store: MachineStore,
        echo: Callable[[str], object] = click.echo,
    ) -> None:
        self._store = store
        self._echo = echo

    def handle(self, event: MachineEvent) -> None:
        template = _TEMPLATES.get(event.type)
        if template is None:
            return

        machine = self._store.get(event.machine_id)
        level = "n/a" if machine is None else machine.stock_level
        self._echo(template.format(machine_id=event.machine_id, level=level))
