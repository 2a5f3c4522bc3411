"""Enumerations used across the router."""

from enum import Enum


class EventType(str, Enum):
    """Routing tag carried by every event.

    Members compare and hash equal to their string value, so the registry
    accepts ``"sale"`` and ``EventType.SALE`` interchangeably.
    """

    # Primary (produced outside the router)
    SALE = "sale"
    REFILL = "refill"
    # Derived (produced by handlers during a drain)
    LOW_STOCK = "low_stock"
    STOCK_OK = "stock_ok"


class StockState(str, Enum):
    """Per-machine state held by the threshold detector."""

    OK = "ok"
    WARNED = "warned"
