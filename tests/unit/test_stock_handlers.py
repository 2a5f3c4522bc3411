"""Tests for the sale and refill subscribers."""

from __future__ import annotations

from vending_router.domain.events import MachineRefillEvent, MachineSaleEvent
from vending_router.domain.machines import Machine, MachineStore
from vending_router.handlers.stock import MachineRefillSubscriber, MachineSaleSubscriber


class TestMachineSaleSubscriber:
    def test_applies_sale(self, store: MachineStore):
        sub = MachineSaleSubscriber(store)
        assert sub.handle(MachineSaleEvent(machine_id="001", sold=2)) is None
        assert store.stock_level("001") == 8

    def test_ignores_refill(self, store: MachineStore):
        sub = MachineSaleSubscriber(store)
        sub.handle(MachineRefillEvent(machine_id="001", refill=5))
        assert store.stock_level("001") == 10

    def test_unknown_machine_is_noop(self, store: MachineStore):
        sub = MachineSaleSubscriber(store)
        sub.handle(MachineSaleEvent(machine_id="999", sold=2))
        assert store.snapshot() == {"001": 10, "002": 10, "003": 10}

    def test_may_go_negative(self, store: MachineStore):
        sub = MachineSaleSubscriber(store)
        sub.handle(MachineSaleEvent(machine_id="001", sold=11))
        assert store.stock_level("001") == -1

    def test_logs_sale(self, store: MachineStore, caplog):
        sub = MachineSaleSubscriber(store)
        with caplog.at_level("INFO"):
            sub.handle(MachineSaleEvent(machine_id="002", sold=1))
        assert "Machine 002 sold 1 units" in caplog.text


class TestMachineRefillSubscriber:
    def test_applies_refill(self, store: MachineStore):
        sub = MachineRefillSubscriber(store)
        sub.handle(MachineRefillEvent(machine_id="003", refill=3))
        assert store.stock_level("003") == 13

    def test_ignores_sale(self, store: MachineStore):
        sub = MachineRefillSubscriber(store)
        sub.handle(MachineSaleEvent(machine_id="003", sold=1))
        assert store.stock_level("003") == 10


class TestScope:
    def test_default_scope_is_whole_store(self, store: MachineStore):
        sub = MachineSaleSubscriber(store)
        assert sub.machine_ids == ["001", "002", "003"]
        assert [m.id for m in sub.machines] == ["001", "002", "003"]

    def test_explicit_scope(self, store: MachineStore):
        sub = MachineSaleSubscriber(store, machine_ids=["002"])
        sub.handle(MachineSaleEvent(machine_id="001", sold=1))
        sub.handle(MachineSaleEvent(machine_id="002", sold=1))
        assert store.snapshot() == {"001": 10, "002": 9, "003": 10}

    def test_remove_machine_by_object_or_id(self, store: MachineStore):
        sub = MachineSaleSubscriber(store)
        sub.remove_machine(store.get("001"))
        sub.remove_machine("002")
        sub.handle(MachineSaleEvent(machine_id="001", sold=1))
        sub.handle(MachineSaleEvent(machine_id="002", sold=1))
        assert store.stock_level("001") == 10
        assert store.stock_level("002") == 10
        assert not sub.in_scope("001")

    def test_add_machine_after_store_insert(self, store: MachineStore):
        sub = MachineRefillSubscriber(store)
        store.add(Machine(id="004", stock_level=0))
        sub.handle(MachineRefillEvent(machine_id="004", refill=5))
        assert store.stock_level("004") == 0  # not in scope yet

        sub.add_machine("004")
        sub.handle(MachineRefillEvent(machine_id="004", refill=5))
        assert store.stock_level("004") == 5

    def test_add_machine_object_joins_store(self, store: MachineStore):
        sub = MachineSaleSubscriber(store)
        sub.add_machine(Machine(id="004", stock_level=4))
        assert "004" in store
        assert sub.in_scope("004")

        sub.handle(MachineSaleEvent(machine_id="004", sold=2))
        assert store.stock_level("004") == 2

    def test_add_machine_object_already_in_store(self, store: MachineStore):
        sub = MachineSaleSubscriber(store, machine_ids=[])
        sub.add_machine(store.get("001"))
        sub.handle(MachineSaleEvent(machine_id="001", sold=1))
        assert store.stock_level("001") == 9
        assert len(store) == 3

    def test_scope_survives_store_removal(self, store: MachineStore):
        sub = MachineSaleSubscriber(store)
        store.remove("003")
        sub.handle(MachineSaleEvent(machine_id="003", sold=1))  # should not raise
        assert sub.in_scope("003")
        assert [m.id for m in sub.machines] == ["001", "002"]

    def test_remove_unknown_is_noop(self, store: MachineStore):
        sub = MachineSaleSubscriber(store)
        sub.remove_machine("999")
        assert sub.machine_ids == ["001", "002", "003"]
