"""Discrete-event simulation loop over virtual time.

The Simulation owns the clock and the event heap. It injects both into
every registered entity, then pops events in (time, insertion) order and
schedules whatever their handlers return.

Two ways to drive it:

    sim = Simulation(entities=[engine])
    sim.schedule(events)
    summary = sim.run()          # until only daemon events remain

    sim.advance(10.0)            # step virtual time, e.g. from a UI loop
    sim.run_until(Instant.from_seconds(30))

The heap is guarded by a lock held only around push and pop, never while a
handler runs, so commands may schedule events from another thread while
the loop is stepping.
"""

from __future__ import annotations

import logging
import threading
import time as wall_time
from collections import Counter
from typing import TYPE_CHECKING, Union

from dispatchsim.core.clock import Clock
from dispatchsim.core.event import Event
from dispatchsim.core.event_heap import EventHeap
from dispatchsim.core.temporal import Instant
from dispatchsim.instrumentation.summary import EntitySummary, SimulationSummary

if TYPE_CHECKING:
    from dispatchsim.core.entity import Entity

logger = logging.getLogger(__name__)


class Simulation:
    """Event loop with a shared virtual clock.

    Args:
        start_time: Initial virtual time. Defaults to Instant.Epoch.
        end_time: Hard stop for run(). Events after it stay on the heap.
        duration: Alternative to end_time, in seconds from start_time.
        entities: Entities to attach (clock + scheduler injection).
        probes: Probe entities; attached and started automatically.

    Raises:
        ValueError: If both end_time and duration are given.
    """

    def __init__(
        self,
        start_time: Instant = Instant.Epoch,
        end_time: Instant | None = None,
        duration: float | None = None,
        entities: list[Entity] | None = None,
        probes: list[Entity] | None = None,
    ):
        if end_time is not None and duration is not None:
            raise ValueError("Pass either end_time or duration, not both.")
        if duration is not None:
            end_time = start_time + duration

        self._start_time = start_time
        self._end_time = end_time
        self._clock = Clock(start_time)
        self._heap = EventHeap()
        self._lock = threading.RLock()
        self._entities: list[Entity] = []
        self._events_processed = 0
        self._events_cancelled = 0
        self._handled_by: Counter[str] = Counter()
        self._wall_clock_seconds = 0.0

        for entity in entities or []:
            self.add_entity(entity)
        for probe in probes or []:
            self.add_entity(probe)
            self.schedule(probe.start())

    @property
    def now(self) -> Instant:
        return self._clock.now

    @property
    def clock(self) -> Clock:
        return self._clock

    @property
    def entities(self) -> list[Entity]:
        return list(self._entities)

    @property
    def pending_event_count(self) -> int:
        with self._lock:
            return self._heap.size()

    def add_entity(self, entity: Entity) -> None:
        """Attach an entity to this simulation's clock and scheduler."""
        entity.set_clock(self._clock)
        entity.set_scheduler(self)
        self._entities.append(entity)

    def schedule(self, events: Union[Event, list[Event]]) -> None:
        """Queue one or more events for processing."""
        if isinstance(events, Event):
            events = [events]
        for event in events:
            target = event.target
            # Ad-hoc targets such as Event.once() callbacks are attached on demand.
            if getattr(target, "_clock", None) is None and hasattr(target, "set_clock"):
                target.set_clock(self._clock)
                target.set_scheduler(self)
        with self._lock:
            self._heap.push(list(events))

    def run(self) -> SimulationSummary:
        """Process events until no primary events remain or end_time passes."""
        logger.info("Simulation started at %r", self.now)
        started = wall_time.perf_counter()

        while True:
            event = self._pop_next(self._end_time, primary_only=True)
            if event is None:
                break
            self._process(event)

        self._wall_clock_seconds += wall_time.perf_counter() - started
        summary = self.summary
        logger.info(
            "Simulation finished at %r: %d events processed, %d cancelled",
            self.now,
            summary.total_events_processed,
            summary.events_cancelled,
        )
        return summary

    def run_until(self, until: Instant) -> None:
        """Process every event due at or before `until`, then move the clock there.

        Daemon events are processed too, so probes keep sampling while a
        caller steps through time.

        Raises:
            ValueError: If `until` is earlier than the current time.
        """
        if until < self._clock.now:
            raise ValueError(f"Cannot run backwards: {until!r} < now {self._clock.now!r}")

        started = wall_time.perf_counter()
        while True:
            event = self._pop_next(until)
            if event is None:
                break
            self._process(event)
        with self._lock:
            self._clock.update(until)
        self._wall_clock_seconds += wall_time.perf_counter() - started

    def advance(self, seconds: float) -> None:
        """Step virtual time forward by `seconds`.

        Raises:
            ValueError: If seconds is negative.
        """
        if seconds < 0:
            raise ValueError(f"seconds must be >= 0, got {seconds}")
        self.run_until(self._clock.now + seconds)

    def _pop_next(self, until: Instant | None, primary_only: bool = False) -> Event | None:
        """Pop the next event due at or before `until`, or None to stop.

        With primary_only, also stops once only daemon or cancelled events remain.
        """
        with self._lock:
            if not self._heap.has_events():
                return None
            if primary_only and not self._heap.has_primary_events():
                return None
            if until is not None and self._heap.peek().time > until:
                return None
            return self._heap.pop()

    def _process(self, event: Event) -> None:
        if event.cancelled:
            self._events_cancelled += 1
            logger.debug("Skipping cancelled %r", event)
            return

        if event.time > self._clock.now:
            self._clock.update(event.time)

        reactions = event.invoke()
        self._events_processed += 1
        self._handled_by[getattr(event.target, "name", type(event.target).__name__)] += 1
        if reactions:
            self.schedule(reactions)

    @property
    def summary(self) -> SimulationSummary:
        duration_s = (self._clock.now - self._start_time).to_seconds()
        return SimulationSummary(
            duration_s=duration_s,
            total_events_processed=self._events_processed,
            events_cancelled=self._events_cancelled,
            events_per_second=self._events_processed / duration_s if duration_s > 0 else 0.0,
            wall_clock_seconds=self._wall_clock_seconds,
            entities={
                entity.name: EntitySummary(
                    name=entity.name,
                    entity_type=type(entity).__name__,
                    events_handled=self._handled_by.get(entity.name, 0),
                )
                for entity in self._entities
            },
        )
