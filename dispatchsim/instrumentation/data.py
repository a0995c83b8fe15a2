"""Time-series data storage for simulation metrics.

Data collects timestamped samples during a simulation, typically from a
Probe watching queue depth or worker utilization, and exports them to
pandas for post-run analysis and plotting.
"""

from __future__ import annotations

from typing import Any, List, Tuple

import pandas as pd

from dispatchsim.core.temporal import Instant


class Data:
    """Container for timestamped metric samples.

    Stores (time_seconds, value) pairs in append order. For time-ordered
    data, ensure add_stat is called with non-decreasing times.
    """

    TIME_S = "time_s"
    VALUE = "value"

    def __init__(self) -> None:
        self._samples: List[Tuple[float, Any]] = []

    def add_stat(self, value: Any, time: Instant) -> None:
        """Record a data point at the given simulation time."""
        self._samples.append((time.to_seconds(), value))

    def clear(self) -> None:
        self._samples.clear()

    @property
    def values(self) -> List[Tuple[float, Any]]:
        """All recorded samples as (time_seconds, value) tuples."""
        return self._samples

    def between(self, start_s: float, end_s: float) -> Data:
        """Return a new Data with samples in [start, end)."""
        result = Data()
        result._samples = [(t, v) for t, v in self._samples if start_s <= t < end_s]
        return result

    def times(self) -> list[float]:
        return [t for t, _ in self._samples]

    def raw_values(self) -> list[Any]:
        return [v for _, v in self._samples]

    def count(self) -> int:
        return len(self._samples)

    def mean(self) -> float:
        """Mean of sample values. Returns 0.0 if empty."""
        if not self._samples:
            return 0.0
        return float(self.to_dataframe()[self.VALUE].mean())

    def max(self) -> float:
        """Maximum sample value. Returns 0.0 if empty."""
        if not self._samples:
            return 0.0
        return float(self.to_dataframe()[self.VALUE].max())

    def to_dataframe(self) -> pd.DataFrame:
        """Samples as a DataFrame with columns time_s and value."""
        return pd.DataFrame(self._samples, columns=[self.TIME_S, self.VALUE])

    def __len__(self) -> int:
        return len(self._samples)

    def __bool__(self) -> bool:
        return len(self._samples) > 0
