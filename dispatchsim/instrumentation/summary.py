"""Simulation summary generated after a run completes.

SimulationSummary is returned by Simulation.run() and also accessible via
Simulation.summary at any point while stepping.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass
class EntitySummary:
    """Per-entity statistics from a simulation run."""
    name: str
    entity_type: str
    events_handled: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "type": self.entity_type,
            "events_handled": self.events_handled,
        }


@dataclass
class SimulationSummary:
    """Auto-generated summary of a simulation run."""
    duration_s: float
    total_events_processed: int
    events_cancelled: int
    events_per_second: float
    wall_clock_seconds: float
    entities: dict[str, EntitySummary] = field(default_factory=dict)

    def __str__(self) -> str:
        lines = [
            "Simulation Summary",
            f"  Duration: {self.duration_s:.2f}s (sim) / {self.wall_clock_seconds:.3f}s (wall)",
            f"  Events processed: {self.total_events_processed}",
            f"  Events cancelled: {self.events_cancelled}",
            f"  Events/sec (sim): {self.events_per_second:.1f}",
        ]
        if self.entities:
            lines.append("  Entities:")
            for name, es in self.entities.items():
                lines.append(f"    {name} ({es.entity_type}): {es.events_handled} events")
        return "\n".join(lines)

    def to_dict(self) -> dict[str, Any]:
        return {
            "duration_s": self.duration_s,
            "total_events_processed": self.total_events_processed,
            "events_cancelled": self.events_cancelled,
            "events_per_second": self.events_per_second,
            "wall_clock_seconds": self.wall_clock_seconds,
            "entities": {
                name: es.to_dict() for name, es in self.entities.items()
            },
        }
