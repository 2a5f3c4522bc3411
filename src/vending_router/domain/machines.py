"""Machines and the store that owns them.

Handlers never keep their own ``Machine`` references.  They hold ids and
go through :class:`MachineStore` for every read and mutation, so there
is exactly one copy of each machine's stock level.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from dataclasses import dataclass

from vending_router.core.errors import DuplicateMachineError, UnknownMachineError

logger = logging.getLogger(__name__)

DEFAULT_STOCK_LEVEL = 10


@dataclass
class Machine:
    """A vending machine and its current stock.

    ``stock_level`` has no floor: a sale larger than the remaining stock
    takes it negative.
    """

    id: str
    stock_level: int = DEFAULT_STOCK_LEVEL


class MachineStore:
    """Single owned collection of machines, keyed by id."""

    def __init__(self, machines: Iterable[Machine] = ()) -> None:
        self._machines: dict[str, Machine] = {}
        for machine in machines:
            self.add(machine)

    @classmethod
    def with_machines(
        cls,
        machine_ids: Iterable[str],
        stock_level: int = DEFAULT_STOCK_LEVEL,
    ) -> MachineStore:
        """Seed a store with one machine per id at *stock_level*."""
        return cls(Machine(id=mid, stock_level=stock_level) for mid in machine_ids)

    # -- Membership ----------------------------------------------------------

    def add(self, machine: Machine) -> None:
        if machine.id in self._machines:
            raise DuplicateMachineError(f"Machine {machine.id!r} already exists")
        self._machines[machine.id] = machine

    def remove(self, machine_id: str) -> Machine | None:
        """Remove and return the machine, or ``None`` if it was absent."""
        return self._machines.pop(machine_id, None)

    def get(self, machine_id: str) -> Machine | None:
        return self._machines.get(machine_id)

    def ids(self) -> list[str]:
        return list(self._machines)

    def __contains__(self, machine_id: object) -> bool:
        return machine_id in self._machines

    def __iter__(self) -> Iterator[Machine]:
        return iter(list(self._machines.values()))

    def __len__(self) -> int:
        return len(self._machines)

    # -- Stock ---------------------------------------------------------------

    def stock_level(self, machine_id: str) -> int:
        machine = self._machines.get(machine_id)
        if machine is None:
            raise UnknownMachineError(f"No machine {machine_id!r}")
        return machine.stock_level

    def adjust(self, machine_id: str, delta: int) -> int:
        """Apply a signed stock change and return the new level.

        Raises:
            UnknownMachineError: If no machine has *machine_id*.
        """
        machine = self._machines.get(machine_id)
        if machine is None:
            raise UnknownMachineError(f"No machine {machine_id!r}")
        machine.stock_level += delta
        if machine.stock_level < 0:
            logger.warning(
                "Machine %s stock went negative: %d", machine_id, machine.stock_level,
            )
        return machine.stock_level

    def snapshot(self) -> dict[str, int]:
        """Return ``{machine_id: stock_level}`` in insertion order."""
        return {mid: m.stock_level for mid, m in self._machines.items()}
