"""Virtual time primitives.

Instant is a point on the simulation timeline; Duration is a span between
two Instants. Both are stored as integer nanoseconds so that repeated
arithmetic never accumulates floating point drift.
"""

from __future__ import annotations

from typing import Union

_NANOS_PER_SECOND = 1_000_000_000


def _to_nanos(seconds: Union[int, float]) -> int:
    if isinstance(seconds, int):
        return seconds * _NANOS_PER_SECOND
    return int(round(seconds * _NANOS_PER_SECOND))


class Duration:
    """A span of virtual time."""

    __slots__ = ("nanoseconds",)

    def __init__(self, nanoseconds: int):
        self.nanoseconds = nanoseconds

    @classmethod
    def from_seconds(cls, seconds: Union[int, float]) -> Duration:
        return cls(_to_nanos(seconds))

    def to_seconds(self) -> float:
        return float(self.nanoseconds) / _NANOS_PER_SECOND

    def __add__(self, other: Duration) -> Duration:
        if isinstance(other, Duration):
            return Duration(self.nanoseconds + other.nanoseconds)
        return NotImplemented

    def __eq__(self, other):
        if not isinstance(other, Duration):
            return NotImplemented
        return self.nanoseconds == other.nanoseconds

    def __lt__(self, other):
        if not isinstance(other, Duration):
            return NotImplemented
        return self.nanoseconds < other.nanoseconds

    def __le__(self, other):
        if not isinstance(other, Duration):
            return NotImplemented
        return self.nanoseconds <= other.nanoseconds

    def __hash__(self):
        return hash(("Duration", self.nanoseconds))

    def __repr__(self) -> str:
        return f"Duration({self.to_seconds():g}s)"


class Instant:
    """A point in virtual time, measured from the simulation epoch."""

    __slots__ = ("nanoseconds",)

    Epoch: Instant

    def __init__(self, nanoseconds: int):
        self.nanoseconds = nanoseconds

    @classmethod
    def from_seconds(cls, seconds: Union[int, float]) -> Instant:
        return cls(_to_nanos(seconds))

    def to_seconds(self) -> float:
        return float(self.nanoseconds) / _NANOS_PER_SECOND

    def __add__(self, other: Union[Duration, int, float]) -> Instant:
        if isinstance(other, Duration):
            return Instant(self.nanoseconds + other.nanoseconds)
        if isinstance(other, (int, float)):
            return Instant(self.nanoseconds + _to_nanos(other))
        return NotImplemented

    def __sub__(self, other: Union[Instant, Duration, int, float]):
        # Instant - Instant is a Duration; Instant - span is an Instant.
        if isinstance(other, Instant):
            return Duration(self.nanoseconds - other.nanoseconds)
        if isinstance(other, Duration):
            return Instant(self.nanoseconds - other.nanoseconds)
        if isinstance(other, (int, float)):
            return Instant(self.nanoseconds - _to_nanos(other))
        return NotImplemented

    def __eq__(self, other):
        if not isinstance(other, Instant):
            return NotImplemented
        return self.nanoseconds == other.nanoseconds

    def __lt__(self, other):
        if not isinstance(other, Instant):
            return NotImplemented
        return self.nanoseconds < other.nanoseconds

    def __le__(self, other):
        if not isinstance(other, Instant):
            return NotImplemented
        return self.nanoseconds <= other.nanoseconds

    def __gt__(self, other):
        if not isinstance(other, Instant):
            return NotImplemented
        return self.nanoseconds > other.nanoseconds

    def __ge__(self, other):
        if not isinstance(other, Instant):
            return NotImplemented
        return self.nanoseconds >= other.nanoseconds

    def __hash__(self):
        return hash(("Instant", self.nanoseconds))

    def __repr__(self) -> str:
        return f"Instant({self.to_seconds():g}s)"


Instant.Epoch = Instant(0)
