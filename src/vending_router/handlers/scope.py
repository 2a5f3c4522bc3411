"""Per-handler machine scope.

A handler's scope is the set of machine ids it reacts to.  It is managed
separately from router subscriptions, so a handler can stop reacting to
one machine while staying subscribed to the event type.
"""

from __future__ import annotations

from collections.abc import Iterable

from vending_router.domain.machines import Machine, MachineStore


def machine_id_of(machine: Machine | str) -> str:
    return machine.id if isinstance(machine, Machine) else machine


class ScopedSubscriber:
    """Base for handlers that act on a subset of the store's machines.

    Args:
        store: The shared machine store.
        machine_ids: Initial scope.  ``None`` means every machine in the
            store at construction time.
    """

    def __init__(
        self,
        store: MachineStore,
        machine_ids: Iterable[str] | None = None,
    ) -> None:
        self._store = store
        ids = store.ids() if machine_ids is None else machine_ids
        self._scope: dict[str, None] = {}
        for mid in ids:
            self._enter_scope(mid)

    def add_machine(self, machine: Machine | str) -> None:
        """Start reacting to *machine*.

        A ``Machine`` object the store does not hold yet is added to it.
        """
        mid = machine_id_of(machine)
        if isinstance(machine, Machine) and mid not in self._store:
            self._store.add(machine)
        if mid not in self._scope:
            self._enter_scope(mid)

    def remove_machine(self, machine: Machine | str) -> None:
        mid = machine_id_of(machine)
        if mid in self._scope:
            self._leave_scope(mid)

    def in_scope(self, machine_id: str) -> bool:
        return machine_id in self._scope

    @property
    def machine_ids(self) -> list[str]:
        return list(self._scope)

    @property
    def machines(self) -> list[Machine]:
        """In-scope machines that are still in the store."""
        found = (self._store.get(mid) for mid in self._scope)
        return [m for m in found if m is not None]

    def _lookup(self, machine_id: str) -> Machine | None:
        """Return the machine if it is in scope and in the store."""
        if machine_id not in self._scope:
            return None
        return self._store.get(machine_id)

    # Subclasses extend these to keep per-machine state in step.
    def _enter_scope(self, machine_id: str) -> None:
        self._scope[machine_id] = None

    def _leave_scope(self, machine_id: str) -> None:
        del self._scope[machine_id]
