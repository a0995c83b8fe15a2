"""Lightweight entity adapters for function-based event handling.

CallbackEntity wraps a plain function as an Entity so that Event.once() can
use target-based dispatch uniformly.
"""

from typing import Callable, Union

from dispatchsim.core.entity import Entity
from dispatchsim.core.event import Event


class CallbackEntity(Entity):
    """Entity that delegates handle_event to a callback function.

    Args:
        name: Identifier for logging and debugging.
        fn: Function called with the event; returns events or None.
    """

    def __init__(
        self,
        name: str,
        fn: Callable[[Event], Union[list[Event], Event, None]],
    ):
        super().__init__(name)
        self._fn = fn

    def handle_event(self, event: Event) -> list[Event] | Event | None:
        return self._fn(event)
