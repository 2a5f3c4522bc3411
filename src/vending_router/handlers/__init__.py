"""Subscribers reacting to fleet events."""

from vending_router.handlers.stock import (
    MachineRefillSubscriber,
    MachineSaleSubscriber,
    StockMutationSubscriber,
)
from vending_router.handlers.stock_warning import StockWarningSubscriber
from vending_router.handlers.terminal import StockAlertPrinter

__all__ = [
    "MachineRefillSubscriber",
    "MachineSaleSubscriber",
    "StockAlertPrinter",
    "StockMutationSubscriber",
    "StockWarningSubscriber",
]
