"""Structured logging with drain_id support.

Uses structlog on top of stdlib logging.  Every log entry carries the
drain_id of the router drain it was emitted from, so all lines caused by
one top-level ``publish`` can be grouped together.
"""

from __future__ import annotations

import logging
import sys
from contextvars import ContextVar
from typing import Any

import structlog

from vending_router.core.ids import new_id

# Context var for drain_id propagation
_drain_id: ContextVar[str] = ContextVar("drain_id", default="")


def get_drain_id() -> str:
    """Get current drain ID from context (empty outside a drain)."""
    return _drain_id.get()


def set_drain_id(drain_id: str) -> None:
    """Set drain ID in context."""
    _drain_id.set(drain_id)


def new_drain_id() -> str:
    """Generate and set a new drain ID."""
    did = new_id()
    _drain_id.set(did)
    return did


def _add_drain_id(
    logger: Any, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """Structlog processor: add drain_id to every log entry."""
    did = get_drain_id()
    if did:
        event_dict["drain_id"] = did
    return event_dict


def setup_logging(
    level: str = "INFO",
    format: str = "console",
) -> None:
    """Configure structured logging for the application.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR).
        format: "json" for machine-readable output, "console" for humans.
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    shared: list[Any] = [
        structlog.contextvars.merge_contextvars,
        _add_drain_id,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    if format == "json":
        renderer: Any = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *shared,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.UnicodeDecoder(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    # Route plain ``logging.getLogger(__name__)`` records through the same
    # processors so module loggers and structlog loggers render alike.
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=shared,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                renderer,
            ],
        )
    )
    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(log_level)
