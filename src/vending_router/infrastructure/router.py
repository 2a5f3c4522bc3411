"""Event router: subscriber registry plus an ordered dispatch queue.

Design goals
------------
1.  **Tag-routed dispatching**: handlers register under an ``EventType``
    (or its string value).  A published event goes to every handler
    registered under ``event.type``, in registration order.
2.  **Single drain loop**: the first ``publish()`` on an idle router
    drains the queue to empty before returning.  A ``publish()`` made
    while a drain is running (from inside a handler, or from another
    thread) only enqueues and returns.
3.  **Derived events go to the back**: events a handler returns are
    appended to the tail of the queue, so they are dispatched after
    everything that was already pending.
4.  **Snapshot at dequeue**: the handler list for an event is copied when
    the event leaves the queue.  ``subscribe``/``unsubscribe`` calls made
    during that event's dispatch apply from the next dequeued event on.
5.  **Loud failures**: a handler exception stops the drain, drops the
    remaining queue and surfaces as ``DispatchError`` to the top-level
    ``publish()`` caller.  The router is idle and reusable afterwards.

This module provides:

*  ``Subscriber``: the handler protocol.
*  ``IEventRouter``: the router protocol (interface).
*  ``EventRouter``: the in-process implementation.
"""

from __future__ import annotations

import logging
import threading
from collections import defaultdict, deque
from collections.abc import Callable, Iterable
from typing import Protocol, Union, runtime_checkable

from vending_router.core.enums import EventType
from vending_router.core.errors import DispatchError
from vending_router.domain.events import MachineEvent
from vending_router.observability.logger import get_drain_id, new_drain_id, set_drain_id

logger = logging.getLogger(__name__)

#: What a handler may hand back: nothing, one event, or several.
HandlerResult = Union[MachineEvent, Iterable[MachineEvent], None]


# ---------------------------------------------------------------------------
# Protocols
# ---------------------------------------------------------------------------

@runtime_checkable
class Subscriber(Protocol):
    """Anything with a ``handle(event)`` method."""

    def handle(self, event: MachineEvent) -> HandlerResult: ...


#: Registry entries are subscribers or bare callables taking the event.
Handler = Union[Subscriber, Callable[[MachineEvent], HandlerResult]]


@runtime_checkable
class IEventRouter(Protocol):
    """Publish/subscribe router keyed by event type tag."""

    def publish(self, event: MachineEvent) -> None:
        """Enqueue *event*; drain the queue unless a drain is running."""
        ...

    def subscribe(self, event_type: EventType | str, handler: Handler) -> None:
        """Append *handler* to the list for *event_type*."""
        ...

    def unsubscribe(self, event_type: EventType | str, handler: Handler) -> None:
        """Remove every entry for *handler* (by identity) under *event_type*."""
        ...


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _invoke(handler: Handler, event: MachineEvent) -> tuple[MachineEvent, ...]:
    handle = getattr(handler, "handle", handler)
    result = handle(event)

    if result is None:
        return ()
    if isinstance(result, MachineEvent):
        return (result,)

    produced = tuple(result)
    for item in produced:
        if not isinstance(item, MachineEvent):
            raise TypeError(
                f"Handler {handler!r} returned {type(item).__name__}, "
                "expected MachineEvent"
            )
    return produced


def _key(event_type: EventType | str) -> str:
    return event_type.value if isinstance(event_type, EventType) else event_type


# ---------------------------------------------------------------------------
# In-process implementation
# ---------------------------------------------------------------------------

class EventRouter:
    """Deterministic, in-process event router.

    Events are dispatched strictly in enqueue order.  An event produced
    by a handler while dispatching *e* lands behind every event that was
    already queued when *e* started dispatch.
    """

    def __init__(self) -> None:
        self._subscribers: dict[str, list[Handler]] = defaultdict(list)
        self._queue: deque[MachineEvent] = deque()
        self._lock = threading.Lock()
        self._draining = False
        self._dispatched_count: int = 0

    # -- Registry ----------------------------------------------------------

    def subscribe(self, event_type: EventType | str, handler: Handler) -> None:
        """Register *handler* for *event_type*.

        Repeat calls add repeat entries; the handler then runs once per
        entry.
        """
        with self._lock:
            self._subscribers[_key(event_type)].append(handler)

    def unsubscribe(self, event_type: EventType | str, handler: Handler) -> None:
        """Drop every entry for *handler* under *event_type*.

        A type or handler that was never registered is a no-op.
        """
        with self._lock:
            handlers = self._subscribers.get(_key(event_type))
            if handlers is None:
                return
            handlers[:] = [h for h in handlers if h is not handler]

    def subscribers(self, event_type: EventType | str) -> tuple[Handler, ...]:
        """Return a snapshot of the handlers registered for *event_type*."""
        with self._lock:
            return tuple(self._subscribers.get(_key(event_type), ()))

    # -- Publish / drain ---------------------------------------------------

    def publish(self, event: MachineEvent) -> None:
        """Enqueue *event* and, if the router is idle, drain to empty.

        Raises
        ------
        DispatchError
            If any handler raised during the drain started by this call.
        """
        with self._lock:
            self._queue.append(event)
            if self._draining:
                logger.debug(
                    "Queued %s for %s behind %d pending",
                    event.type.value, event.machine_id, len(self._queue) - 1,
                )
                return
            self._draining = True

        previous = get_drain_id()
        new_drain_id()
        try:
            self._drain()
        finally:
            set_drain_id(previous)

    def _drain(self) -> None:
        while True:
            with self._lock:
                if not self._queue:
                    self._draining = False
                    return
                event = self._queue.popleft()
                handlers = tuple(self._subscribers.get(event.type.value, ()))

            if not handlers:
                logger.debug("No subscribers for %s", event.type.value)
                continue

            for handler in handlers:
                try:
                    produced = _invoke(handler, event)
                except BaseException as exc:
                    undelivered = self._abandon()
                    if not isinstance(exc, Exception):
                        raise
                    logger.exception(
                        "Handler error on %s for %s; dropped %d queued event(s)",
                        event.type.value, event.machine_id, len(undelivered),
                    )
                    raise DispatchError(event, handler, undelivered) from exc

                self._dispatched_count += 1
                if produced:
                    with self._lock:
                        self._queue.extend(produced)

    def _abandon(self) -> tuple[MachineEvent, ...]:
        """Empty the queue and release the drain flag."""
        with self._lock:
            undelivered = tuple(self._queue)
            self._queue.clear()
            self._draining = False
        return undelivered

    # -- Observability -----------------------------------------------------

    @property
    def pending(self) -> int:
        """Number of events waiting in the queue."""
        with self._lock:
            return len(self._queue)

    @property
    def is_draining(self) -> bool:
        with self._lock:
            return self._draining

    @property
    def dispatched_count(self) -> int:
        """Handler invocations that returned without raising."""
        return self._dispatched_count

    def __repr__(self) -> str:
        with self._lock:
            types = {t: len(h) for t, h in self._subscribers.items()}
            pending = len(self._queue)
        return f"EventRouter(subscribers={types}, pending={pending})"
