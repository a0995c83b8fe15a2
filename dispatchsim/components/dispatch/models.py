"""Jobs, workers, and their lifecycle states."""

from __future__ import annotations

import enum
from dataclasses import dataclass

from dispatchsim.core.temporal import Duration, Instant


class Priority(str, enum.Enum):
    HIGH = "HIGH"
    NORMAL = "NORMAL"

    @classmethod
    def parse(cls, value: Priority | str) -> Priority:
        """Coerce a boundary value into a Priority.

        Accepts members, their string values (case-insensitive), and "VIP"
        as an alias for HIGH.

        Raises:
            ValueError: For anything else.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            key = value.strip().upper()
            if key == "VIP":
                return cls.HIGH
            if key in cls.__members__:
                return cls[key]
        raise ValueError(f"Unknown priority: {value!r}")


class JobStatus(str, enum.Enum):
    PENDING = "PENDING"    # waiting for a worker
    ASSIGNED = "ASSIGNED"  # held by exactly one worker
    DONE = "DONE"          # finished; terminal


class WorkerState(str, enum.Enum):
    IDLE = "IDLE"
    BUSY = "BUSY"


@dataclass(eq=False)
class Job:
    """A unit of work. Owned by the engine, never deleted.

    Attributes:
        id: 1-based submission sequence number.
        priority: HIGH jobs are served before NORMAL jobs.
        status: Lifecycle state.
        created_at: Virtual time of submission.
        completed_at: Virtual time of completion; None until DONE.
    """

    id: int
    priority: Priority
    status: JobStatus = JobStatus.PENDING
    created_at: Instant = Instant.Epoch
    completed_at: Instant | None = None

    @property
    def is_live(self) -> bool:
        """Pending or assigned, i.e. still competing for queue position."""
        return self.status in (JobStatus.PENDING, JobStatus.ASSIGNED)

    @property
    def turnaround(self) -> Duration | None:
        if self.completed_at is None:
            return None
        return self.completed_at - self.created_at


@dataclass(eq=False)
class Worker:
    """An identical processing slot that holds at most one job."""

    id: int
    current_job: Job | None = None
    jobs_completed: int = 0

    @property
    def state(self) -> WorkerState:
        return WorkerState.IDLE if self.current_job is None else WorkerState.BUSY

    @property
    def is_idle(self) -> bool:
        return self.current_job is None
