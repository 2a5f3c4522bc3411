"""Shared fixtures for the vending-router test suite."""

from __future__ import annotations

import pytest

from vending_router.core.config import Settings
from vending_router.domain.events import MachineEvent
from vending_router.domain.machines import MachineStore
from vending_router.infrastructure.router import EventRouter
from vending_router.simulation.fleet import Fleet, wire_fleet


# ---------------------------------------------------------------------------
# Recording helpers
# ---------------------------------------------------------------------------

class Recorder:
    """Subscriber that remembers what it saw and optionally returns events."""

    def __init__(self, name: str = "recorder", log: list[str] | None = None) -> None:
        self.name = name
        self.received: list[MachineEvent] = []
        self.log = log if log is not None else []
        self.returns: dict[str, list[MachineEvent]] = {}

    def handle(self, event: MachineEvent) -> list[MachineEvent]:
        self.received.append(event)
        self.log.append(f"{self.name}:{event.machine_id}")
        return self.returns.pop(event.event_id, [])

    def __repr__(self) -> str:
        return f"Recorder({self.name!r})"


# ---------------------------------------------------------------------------
# Core fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def router() -> EventRouter:
    return EventRouter()


@pytest.fixture
def store() -> MachineStore:
    """Three machines at the default stock level of 10."""
    return MachineStore.with_machines(["001", "002", "003"])


@pytest.fixture
def settings() -> Settings:
    return Settings()


@pytest.fixture
def printed() -> list[str]:
    """Lines written by the fleet's alert printer."""
    return []


@pytest.fixture
def fleet(
    router: EventRouter,
    store: MachineStore,
    settings: Settings,
    printed: list[str],
) -> Fleet:
    return wire_fleet(router, store, settings, echo=printed.append)


@pytest.fixture
def make_recorder():
    """Factory for :class:`Recorder` subscribers sharing an optional log."""

    def _make(name: str = "recorder", log: list[str] | None = None) -> Recorder:
        return Recorder(name, log)

    return _make
