"""Threshold detector: turns stock levels into edge-triggered notifications.

Each in-scope machine is either ``OK`` or ``WARNED``:

* ``OK -> WARNED`` when the level is observed below the threshold.
  Emits one :class:`LowStockWarningEvent`.
* ``WARNED -> OK`` when the level is observed at or above the threshold.
  Emits one :class:`StockLevelOkEvent`.

Any other observation leaves the state alone and emits nothing, so a
machine that keeps selling while already low produces a single warning.

The detector reads the level from the store *after* the mutation, so it
must be subscribed to ``sale`` and ``refill`` after the sale and refill
subscribers.  :func:`vending_router.simulation.fleet.wire_fleet` does
this.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from vending_router.core.enums import StockState
from vending_router.core.errors import ConfigError
from vending_router.domain.events import (
    LowStockWarningEvent,
    MachineEvent,
    NotificationEvent,
    STOCK_EVENT_TYPES,
    StockLevelOkEvent,
)
from vending_router.domain.machines import MachineStore
from vending_router.handlers.scope import ScopedSubscriber

logger = logging.getLogger(__name__)

DEFAULT_LOW_STOCK_THRESHOLD = 3


class StockWarningSubscriber(ScopedSubscriber):
    """Edge-triggered low-stock / stock-ok detector.

    Args:
        store: The shared machine store.
        threshold: Levels strictly below this are "low".
        machine_ids: Initial scope.  ``None`` means every machine in the
            store at construction time.
    """

    def __init__(
        self,
        store: MachineStore,
        threshold: int = DEFAULT_LOW_STOCK_THRESHOLD,
        machine_ids: Iterable[str] | None = None,
    ) -> None:
        if threshold < 0:
            raise ConfigError(f"threshold must be >= 0, got {threshold}")
        self._threshold = threshold
        self._states: dict[str, StockState] = {}
        super().__init__(store, machine_ids)

    @property
    def threshold(self) -> int:
        return self._threshold

    def state(self, machine_id: str) -> StockState | None:
        """Current state, or ``None`` for machines outside the scope."""
        return self._states.get(machine_id)

    def handle(self, event: MachineEvent) -> NotificationEvent | None:
        if event.type not in STOCK_EVENT_TYPES:
            return None
        return self._observe(event)

    def _observe(self, event: MachineEvent) -> NotificationEvent | None:
        machine = self._lookup(event.machine_id)
        if machine is None:
            return None

        level = machine.stock_level
        state = self._states[machine.id]
        below = level < self._threshold

        if below and state is StockState.OK:
            self._states[machine.id] = StockState.WARNED
            logger.warning(
                "Machine %s low on stock: %d < %d",
                machine.id, level, self._threshold,
            )
            return LowStockWarningEvent(
                machine_id=machine.id,
                causation_id=event.event_id,
                stock_level=level,
                threshold=self._threshold,
            )

        if not below and state is StockState.WARNED:
            self._states[machine.id] = StockState.OK
            logger.info(
                "Machine %s stock recovered: %d >= %d",
                machine.id, level, self._threshold,
            )
            return StockLevelOkEvent(
                machine_id=machine.id,
                causation_id=event.event_id,
                stock_level=level,
                threshold=self._threshold,
            )

        return None

    def _enter_scope(self, machine_id: str) -> None:
        super()._enter_scope(machine_id)
        self._states[machine_id] = StockState.OK

    def _leave_scope(self, machine_id: str) -> None:
        super()._leave_scope(machine_id)
        del self._states[machine_id]
