"""Priority job dispatch onto a pool of identical workers."""

from dispatchsim.components.dispatch.engine import (
    ADD_WORKER_EVENT,
    COMPLETE_EVENT,
    PROCESSING_TIME,
    REMOVE_WORKER_EVENT,
    SUBMIT_JOB_EVENT,
    DispatchEngine,
    DispatchEngineStats,
)
from dispatchsim.components.dispatch.models import (
    Job,
    JobStatus,
    Priority,
    Worker,
    WorkerState,
)
from dispatchsim.components.dispatch.serializers import (
    jobs_to_dataframe,
    serialize_engine,
)

__all__ = [
    "ADD_WORKER_EVENT",
    "COMPLETE_EVENT",
    "PROCESSING_TIME",
    "REMOVE_WORKER_EVENT",
    "SUBMIT_JOB_EVENT",
    "DispatchEngine",
    "DispatchEngineStats",
    "Job",
    "JobStatus",
    "Priority",
    "Worker",
    "WorkerState",
    "jobs_to_dataframe",
    "serialize_engine",
]
