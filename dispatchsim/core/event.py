"""Events, the fundamental units of simulation work.

Each event represents something that happens at a specific point in virtual
time. When invoked, an event calls its target entity's handle_event() method.
For function-based dispatch, use Event.once() which wraps a function in a
CallbackEntity.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Callable
from itertools import count
from typing import TYPE_CHECKING, Any

from dispatchsim.core.temporal import Instant

if TYPE_CHECKING:
    from dispatchsim.core.entity import Entity

logger = logging.getLogger(__name__)

_global_event_counter = count()


class Event:
    """A unit of work scheduled onto the EventHeap.

    Sorting uses (time, insertion_order) to ensure deterministic FIFO ordering
    for events scheduled at the same instant.

    Events can be cancelled. Cancellation is lazy: the event stays on the heap
    and the simulation loop skips it when popped. Handlers that must not act
    on stale state should still validate it when the event fires, because an
    event may already be in flight when cancel() is called.

    Attributes:
        time: When this event should be processed.
        event_type: Human-readable label for dispatch and debugging.
        target: Entity to receive this event.
        daemon: If True, this event won't block auto-termination.
        context: Arbitrary metadata; handler parameters live under "metadata".
    """

    __slots__ = (
        "_cancelled",
        "_id",
        "_sort_index",
        "context",
        "daemon",
        "event_type",
        "target",
        "time",
    )

    def __init__(
        self,
        time: Instant,
        event_type: str,
        target: Entity | None = None,
        *,
        daemon: bool = False,
        context: dict[str, Any] | None = None,
    ):
        if target is None:
            raise ValueError(f"Event '{event_type}' must have a 'target'.")

        self.time = time
        self.event_type = event_type
        self.target = target
        self.daemon = daemon
        self._sort_index = next(_global_event_counter)
        self._id = uuid.uuid4()
        self._cancelled = False

        self.context = context if context is not None else {}
        self.context.setdefault("id", str(self._id))
        self.context.setdefault("created_at", self.time)
        self.context.setdefault("metadata", {})

    @property
    def cancelled(self) -> bool:
        """Whether this event has been cancelled."""
        return self._cancelled

    def cancel(self) -> None:
        """Mark this event as cancelled. The simulation loop will skip it on pop.

        Cancelling an already-cancelled or already-processed event is a no-op.
        """
        self._cancelled = True

    def invoke(self) -> list[Event]:
        """Dispatch to the target and normalize its reaction into a list."""
        result = self.target.handle_event(self)
        if result is None:
            return []
        if isinstance(result, Event):
            return [result]
        if isinstance(result, list):
            return result
        logger.warning(
            "Handler for %r returned unsupported type %s; ignoring.",
            self.event_type,
            type(result).__name__,
        )
        return []

    def add_context(self, key: str, value: Any) -> None:
        self.context.setdefault("metadata", {})[key] = value

    def get_context(self, key: str) -> Any:
        meta = self.context.get("metadata")
        if meta is None:
            return None
        return meta.get(key)

    def __repr__(self) -> str:
        target_name = getattr(self.target, "name", None) or type(self.target).__name__
        return f"Event({self.time!r}, {self.event_type!r}, target={target_name})"

    def __lt__(self, other: Event) -> bool:
        if self.time != other.time:
            return self.time < other.time
        return self._sort_index < other._sort_index

    def __hash__(self):
        return hash(self._id)

    def __eq__(self, other):
        if not isinstance(other, Event):
            return NotImplemented
        return self._id == other._id

    @staticmethod
    def once(
        time: Instant,
        event_type: str,
        fn: Callable[[Event], Any],
        *,
        daemon: bool = False,
        context: dict[str, Any] | None = None,
    ) -> Event:
        """Create a one-shot event that invokes a function.

        Args:
            time: When this event should fire.
            event_type: Human-readable label for debugging.
            fn: Function called with the event.
            daemon: If True, won't block auto-termination.
            context: Optional metadata dict.
        """
        from dispatchsim.core.callback_entity import CallbackEntity

        entity = CallbackEntity(name=f"once:{event_type}", fn=fn)
        return Event(
            time=time,
            event_type=event_type,
            target=entity,
            daemon=daemon,
            context=context or {},
        )
