"""Base class for simulation actors that respond to events.

Entities are the building blocks of a simulation model. Each entity receives
events via handle_event() and returns reactions (new events or None).
Entities that need to schedule work outside of handle_event(), for example
in response to a direct command from a presentation layer, use schedule().
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Protocol, Union

from dispatchsim.core.event import Event

if TYPE_CHECKING:
    from dispatchsim.core.clock import Clock
    from dispatchsim.core.temporal import Instant

logger = logging.getLogger(__name__)


class Scheduler(Protocol):
    """Anything that can accept events for future processing."""

    def schedule(self, events: Union[Event, list[Event]]) -> None: ...


class Entity(ABC):
    """Abstract base class for all simulation actors.

    The simulation injects the clock and itself (as the scheduler) during
    initialization, so entities should not be used outside a simulation
    context. Tests may inject a bare Clock and a stub scheduler instead.

    Attributes:
        name: Identifier for logging and debugging.
    """

    def __init__(self, name: str):
        self.name = name
        self._clock: Clock | None = None
        self._scheduler: Scheduler | None = None

    def set_clock(self, clock: Clock) -> None:
        """Inject the simulation clock. Called automatically during setup."""
        self._clock = clock
        logger.debug("[%s] Clock injected", self.name)

    def set_scheduler(self, scheduler: Scheduler) -> None:
        """Inject the event scheduler. Called automatically during setup."""
        self._scheduler = scheduler
        logger.debug("[%s] Scheduler injected", self.name)

    @property
    def now(self) -> Instant:
        """Current simulation time from the injected clock.

        Raises:
            RuntimeError: If accessed before clock injection.
        """
        if self._clock is None:
            logger.error("[%s] Attempted to access time before clock injection", self.name)
            raise RuntimeError(
                f"Entity {self.name} is not attached to a simulation (Clock is None)."
            )
        return self._clock.now

    def schedule(self, events: Union[Event, list[Event]]) -> None:
        """Hand events to the simulation for future processing.

        Raises:
            RuntimeError: If called before scheduler injection.
        """
        if self._scheduler is None:
            raise RuntimeError(
                f"Entity {self.name} is not attached to a simulation (Scheduler is None)."
            )
        self._scheduler.schedule(events)

    @abstractmethod
    def handle_event(self, event: Event) -> Union[list[Event], Event, None]:
        """Process an incoming event and return any resulting events."""
        raise NotImplementedError
