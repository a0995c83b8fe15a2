"""Periodic metric measurement.

A Probe samples a metric from a target entity at a fixed interval and stores
the results in a Data container. Probe ticks are daemon events, so they do
not keep Simulation.run() alive once real work is exhausted.

The metric is accessed via reflection (getattr), supporting both
attributes and callable properties.
"""

from __future__ import annotations

import logging

from dispatchsim.core.entity import Entity
from dispatchsim.core.event import Event
from dispatchsim.core.temporal import Instant
from dispatchsim.instrumentation.data import Data

logger = logging.getLogger(__name__)


class Probe(Entity):
    """Periodic metric sampler for monitoring entity state over time.

    Pass probes to ``Simulation(probes=[...])``; the simulation attaches
    them and schedules their first tick.

    Args:
        target: The entity to measure.
        metric: Attribute or property name to sample (accessed via getattr).
        data: Data container to store samples.
        interval: Seconds between measurements. Defaults to 1.0.
        start_time: When to begin probing. Defaults to Instant.Epoch.

    Raises:
        ValueError: If interval is not positive.
    """

    def __init__(
        self,
        target: Entity,
        metric: str,
        data: Data,
        interval: float = 1.0,
        start_time: Instant | None = None,
    ):
        if interval <= 0:
            raise ValueError("Probe interval must be positive.")
        super().__init__(f"Probe_{target.name}_{metric}")
        self.target = target
        self.metric = metric
        self.data_sink = data
        self.interval = interval
        self._start_time = start_time if start_time is not None else Instant.Epoch
        logger.info(
            "Probe created: target=%s metric=%s interval=%.3fs", target.name, metric, interval
        )

    def start(self) -> Event:
        """Return the first sampling event."""
        return Event(time=self._start_time, event_type="probe_event", target=self, daemon=True)

    def handle_event(self, event: Event) -> Event:
        self.data_sink.add_stat(self._sample(), event.time)
        return Event(
            time=event.time + self.interval,
            event_type="probe_event",
            target=self,
            daemon=True,
        )

    def _sample(self) -> float:
        if not hasattr(self.target, self.metric):
            logger.warning("Probe target '%s' has no attribute '%s'", self.target.name, self.metric)
            return 0.0
        raw_val = getattr(self.target, self.metric)
        val = raw_val() if callable(raw_val) else raw_val
        logger.debug("Probe sampled %s.%s = %s", self.target.name, self.metric, val)
        return val

    @classmethod
    def on(cls, target: Entity, metric: str, interval: float = 1.0) -> tuple[Probe, Data]:
        """Create a Probe and its Data container in one call.

        Returns:
            (probe, data) tuple. Pass probe to Simulation(probes=[...]),
            use data for post-simulation analysis.
        """
        data = Data()
        probe = cls(target=target, metric=metric, data=data, interval=interval)
        return probe, data

    @classmethod
    def on_many(
        cls, target: Entity, metrics: list[str], interval: float = 1.0
    ) -> tuple[list[Probe], dict[str, Data]]:
        """Create Probes for multiple metrics on the same target."""
        probes: list[Probe] = []
        data_dict: dict[str, Data] = {}
        for metric in metrics:
            probe, data = cls.on(target, metric, interval=interval)
            probes.append(probe)
            data_dict[metric] = data
        return probes, data_dict
