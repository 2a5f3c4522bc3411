"""Custom exception hierarchy for the router."""

from __future__ import annotations

from typing import Any


class VendingError(Exception):
    """Base exception for all router errors."""


# --- Configuration ---
class ConfigError(VendingError):
    """Invalid or missing configuration."""


# --- Events ---
class InvalidEventError(VendingError):
    """Event constructed with an invalid payload."""


# --- Machines ---
class MachineError(VendingError):
    """Machine store error."""


class DuplicateMachineError(MachineError):
    """A machine with the same id is already in the store."""


class UnknownMachineError(MachineError):
    """The store holds no machine with the requested id."""


# --- Dispatch ---
class DispatchError(VendingError):
    """A handler raised while the router was draining its queue.

    The drain stops at the failing handler.  Events still queued at that
    point are dropped and reported in ``undelivered``.
    """

    def __init__(self, event: Any, handler: Any, undelivered: tuple[Any, ...]):
        self.event = event
        self.handler = handler
        self.undelivered = undelivered
        super().__init__(
            f"Handler {handler!r} failed on {event.type.value} event "
            f"for machine {event.machine_id!r}; "
            f"{len(undelivered)} queued event(s) undelivered"
        )
