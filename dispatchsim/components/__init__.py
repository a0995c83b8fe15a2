"""Simulation components."""

from dispatchsim.components.dispatch import (
    DispatchEngine,
    DispatchEngineStats,
    Job,
    JobStatus,
    Priority,
    Worker,
    WorkerState,
)

__all__ = [
    "DispatchEngine",
    "DispatchEngineStats",
    "Job",
    "JobStatus",
    "Priority",
    "Worker",
    "WorkerState",
]
