"""Sale and refill subscribers: apply stock changes to the store.

Each subscriber mutates only for its own event tag and never returns
derived events.  Events for machines outside the subscriber's scope, or
missing from the store, are ignored.
"""

from __future__ import annotations

import logging
from typing import ClassVar

from vending_router.core.enums import EventType
from vending_router.domain.events import MachineEvent
from vending_router.handlers.scope import ScopedSubscriber

logger = logging.getLogger(__name__)


class StockMutationSubscriber(ScopedSubscriber):
    """Applies ``event.delta`` for events tagged ``event_type``."""

    event_type: ClassVar[EventType]
    verb: ClassVar[str]

    def handle(self, event: MachineEvent) -> None:
        if event.type is not self.event_type:
            return
        if self._lookup(event.machine_id) is None:
            logger.debug(
                "%s ignored %s for unmanaged machine %s",
                type(self).__name__, event.type.value, event.machine_id,
            )
            return

        delta = event.delta  # type: ignore[attr-defined]
        level = self._store.adjust(event.machine_id, delta)
        logger.info(
            "Machine %s %s %d units (stock=%d)",
            event.machine_id, self.verb, abs(delta), level,
        )


class MachineSaleSubscriber(StockMutationSubscriber):
    event_type = EventType.SALE
    verb = "sold"


class MachineRefillSubscriber(StockMutationSubscriber):
    event_type = EventType.REFILL
    verb = "refilled"
