"""Engine state serialization for presentation layers and analysis.

serialize_engine() produces a JSON-safe dict that a UI can render directly.
jobs_to_dataframe() flattens the job history into a pandas DataFrame.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import pandas as pd

if TYPE_CHECKING:
    from dispatchsim.components.dispatch.engine import DispatchEngine
    from dispatchsim.components.dispatch.models import Job, Worker

JOB_COLUMNS = ["id", "priority", "status", "created_at_s", "completed_at_s", "turnaround_s"]


def serialize_job(job: Job) -> dict[str, Any]:
    turnaround = job.turnaround
    return {
        "id": job.id,
        "priority": job.priority.value,
        "status": job.status.value,
        "created_at_s": job.created_at.to_seconds(),
        "completed_at_s": job.completed_at.to_seconds() if job.completed_at is not None else None,
        "turnaround_s": turnaround.to_seconds() if turnaround is not None else None,
    }


def serialize_worker(worker: Worker) -> dict[str, Any]:
    return {
        "id": worker.id,
        "state": worker.state.value,
        "current_job_id": worker.current_job.id if worker.current_job is not None else None,
        "jobs_completed": worker.jobs_completed,
    }


def serialize_engine(engine: DispatchEngine) -> dict[str, Any]:
    """Serialize the engine's observable state to a JSON-safe dict."""
    stats = engine.stats
    return {
        "name": engine.name,
        "time_s": engine.now.to_seconds(),
        "processing_time_s": engine.processing_time,
        "jobs": [serialize_job(job) for job in engine.jobs],
        "workers": [serialize_worker(worker) for worker in engine.workers],
        "pending": [job.id for job in engine.pending_jobs],
        "processing": [job.id for job in engine.processing_jobs],
        "completed": [job.id for job in engine.completed_jobs],
        "stats": {
            "jobs_submitted": stats.jobs_submitted,
            "jobs_assigned": stats.jobs_assigned,
            "jobs_completed": stats.jobs_completed,
            "jobs_requeued": stats.jobs_requeued,
            "workers_added": stats.workers_added,
            "workers_removed": stats.workers_removed,
            "stale_completions": stats.stale_completions,
        },
    }


def jobs_to_dataframe(engine: DispatchEngine) -> pd.DataFrame:
    """One row per job, in queue order."""
    return pd.DataFrame([serialize_job(job) for job in engine.jobs], columns=JOB_COLUMNS)
