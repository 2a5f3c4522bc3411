"""Events routed through the vending fleet.

Design invariants
-----------------
1.  Every event is **immutable** (``frozen=True``) and safe to share
    between handlers without copying.
2.  Every event carries a ``type`` tag (``EventType``).  Handlers branch
    on the tag, never on the concrete class.
3.  ``event_id`` is a UUID4 generated at creation time.
4.  ``causation_id`` points to the ``event_id`` of the event whose
    handling produced this one.  Events from outside the router leave it
    empty.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import ClassVar, Union

from vending_router.core.enums import EventType
from vending_router.core.errors import InvalidEventError
from vending_router.core.ids import new_id as _uuid
from vending_router.core.ids import utc_now as _now

# ---------------------------------------------------------------------------
# Base
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class MachineEvent:
    """Immutable base for every event.

    Shared fields
    ~~~~~~~~~~~~~
    machine_id      Routing key: the machine the event is about.
    event_id        Unique identity (UUID4).
    timestamp       UTC creation time.
    causation_id    The ``event_id`` that directly caused this event.
    """

    TYPE: ClassVar[EventType]

    machine_id: str = ""
    event_id: str = field(default_factory=_uuid)
    timestamp: datetime = field(default_factory=_now)
    causation_id: str = ""

    @property
    def type(self) -> EventType:
        return self.TYPE


def _require_non_negative(event: MachineEvent, name: str, value: int) -> None:
    if value < 0:
        raise InvalidEventError(
            f"{type(event).__name__}.{name} must be >= 0, got {value}"
        )


# =========================================================================
# Stock changes  (produced outside the router)
# =========================================================================

@dataclass(frozen=True)
class MachineSaleEvent(MachineEvent):
    """Units sold from a machine."""

    TYPE: ClassVar[EventType] = EventType.SALE

    sold: int = 0

    def __post_init__(self) -> None:
        _require_non_negative(self, "sold", self.sold)

    @property
    def delta(self) -> int:
        return -self.sold


@dataclass(frozen=True)
class MachineRefillEvent(MachineEvent):
    """Units loaded into a machine."""

    TYPE: ClassVar[EventType] = EventType.REFILL

    refill: int = 0

    def __post_init__(self) -> None:
        _require_non_negative(self, "refill", self.refill)

    @property
    def delta(self) -> int:
        return self.refill


# =========================================================================
# Notifications  (derived by the threshold detector)
# =========================================================================

@dataclass(frozen=True)
class LowStockWarningEvent(MachineEvent):
    """Stock dropped below the threshold."""

    TYPE: ClassVar[EventType] = EventType.LOW_STOCK

    stock_level: int = 0
    threshold: int = 0


@dataclass(frozen=True)
class StockLevelOkEvent(MachineEvent):
    """Stock climbed back to or above the threshold."""

    TYPE: ClassVar[EventType] = EventType.STOCK_OK

    stock_level: int = 0
    threshold: int = 0


StockEvent = Union[MachineSaleEvent, MachineRefillEvent]
NotificationEvent = Union[LowStockWarningEvent, StockLevelOkEvent]


# =========================================================================
# Registry
# =========================================================================

#: Maps each tag to the class that carries it.
EVENT_CLASSES: dict[EventType, type[MachineEvent]] = {
    EventType.SALE: MachineSaleEvent,
    EventType.REFILL: MachineRefillEvent,
    EventType.LOW_STOCK: LowStockWarningEvent,
    EventType.STOCK_OK: StockLevelOkEvent,
}

STOCK_EVENT_TYPES: tuple[EventType, ...] = (EventType.SALE, EventType.REFILL)
NOTIFICATION_EVENT_TYPES: tuple[EventType, ...] = (
    EventType.LOW_STOCK,
    EventType.STOCK_OK,
)
