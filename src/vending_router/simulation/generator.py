"""Seeded random sale/refill generator for the demo fleet."""

from __future__ import annotations

import random
from collections.abc import Iterator, Sequence

from vending_router.core.config import SimulationConfig
from vending_router.core.errors import ConfigError
from vending_router.domain.events import MachineRefillEvent, MachineSaleEvent, StockEvent


class EventGenerator:
    """Produces random stock events for a fixed set of machines.

    Each event is a sale with probability ``config.sale_probability``
    (quantity drawn from ``config.sale_quantities``), otherwise a refill
    (quantity from ``config.refill_quantities``).  The target machine is
    drawn uniformly.

    Args:
        machine_ids: Machines to target.
        config: Probabilities and quantity choices.
        rng: Random source; defaults to ``random.Random(config.seed)``.
    """

    def __init__(
        self,
        machine_ids: Sequence[str],
        config: SimulationConfig | None = None,
        rng: random.Random | None = None,
    ) -> None:
        if not machine_ids:
            raise ConfigError("EventGenerator needs at least one machine id")
        self._machine_ids = list(machine_ids)
        self._config = config or SimulationConfig()
        self._rng = rng or random.Random(self._config.seed)

    def next_event(self) -> StockEvent:
        cfg = self._config
        if self._rng.random() < cfg.sale_probability:
            return MachineSaleEvent(
                machine_id=self._random_machine(),
                sold=self._rng.choice(cfg.sale_quantities),
            )
        return MachineRefillEvent(
            machine_id=self._random_machine(),
            refill=self._rng.choice(cfg.refill_quantities),
        )

    def generate(self, count: int) -> list[StockEvent]:
        return [self.next_event() for _ in range(count)]

    def __iter__(self) -> Iterator[StockEvent]:
        while True:
            yield self.next_event()

    def _random_machine(self) -> str:
        return self._rng.choice(self._machine_ids)
