"""dispatchsim: priority job dispatch onto a worker pool, in virtual time.

Silent by default; see dispatchsim.logging_config to turn logging on.
"""

import logging

from dispatchsim.components.dispatch import (
    PROCESSING_TIME,
    DispatchEngine,
    DispatchEngineStats,
    Job,
    JobStatus,
    Priority,
    Worker,
    WorkerState,
    jobs_to_dataframe,
)
from dispatchsim.core import (
    CallbackEntity,
    Clock,
    Duration,
    Entity,
    Event,
    Instant,
    Simulation,
)
from dispatchsim.instrumentation import Data, EntitySummary, Probe, SimulationSummary
from dispatchsim.logging_config import (
    configure_from_env,
    disable_logging,
    enable_console_logging,
    enable_file_logging,
    enable_json_file_logging,
    enable_json_logging,
    enable_timed_file_logging,
    set_level,
    set_module_level,
)

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    # Core
    "CallbackEntity",
    "Clock",
    "Duration",
    "Entity",
    "Event",
    "Instant",
    "Simulation",
    # Dispatch
    "PROCESSING_TIME",
    "DispatchEngine",
    "DispatchEngineStats",
    "Job",
    "JobStatus",
    "Priority",
    "Worker",
    "WorkerState",
    "jobs_to_dataframe",
    # Instrumentation
    "Data",
    "EntitySummary",
    "Probe",
    "SimulationSummary",
    # Logging
    "configure_from_env",
    "disable_logging",
    "enable_console_logging",
    "enable_file_logging",
    "enable_json_file_logging",
    "enable_json_logging",
    "enable_timed_file_logging",
    "set_level",
    "set_module_level",
]
