"""Priority job dispatch onto a pool of identical workers.

The DispatchEngine keeps one ordered job sequence and a list of workers.
Every state-changing step (a command from the presentation layer, or a
completion timer firing) runs under a single lock and ends the same way:
the assignment pass runs to fixpoint, completion timers are reconciled with
worker state, and subscribers are notified.

Example:
    from dispatchsim import DispatchEngine, Priority, Simulation

    engine = DispatchEngine(processing_time=10.0)
    sim = Simulation(entities=[engine])

    engine.add_worker()
    engine.submit_job(Priority.NORMAL)
    engine.submit_job(Priority.HIGH)
    sim.advance(10.0)   # first job done, HIGH job picked up
"""

from __future__ import annotations

import logging
import threading
import uuid
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any

from dispatchsim.components.dispatch.models import (
    Job,
    JobStatus,
    Priority,
    Worker,
)
from dispatchsim.components.dispatch.serializers import serialize_engine
from dispatchsim.core.entity import Entity
from dispatchsim.core.event import Event
from dispatchsim.core.temporal import Duration

logger = logging.getLogger(__name__)

PROCESSING_TIME = 10.0
"""Seconds a worker spends on one job."""

COMPLETE_EVENT = "_job_complete"
SUBMIT_JOB_EVENT = "SubmitJob"
ADD_WORKER_EVENT = "AddWorker"
REMOVE_WORKER_EVENT = "RemoveWorker"

Listener = Callable[["DispatchEngine"], None]


@dataclass(frozen=True)
class DispatchEngineStats:
    """Statistics tracked by DispatchEngine."""

    jobs_submitted: int = 0
    jobs_assigned: int = 0
    jobs_completed: int = 0
    jobs_requeued: int = 0
    workers_added: int = 0
    workers_removed: int = 0
    stale_completions: int = 0


class DispatchEngine(Entity):
    """Work-conserving dispatcher with two priority tiers.

    Jobs are kept in a single sequence in which every live HIGH job precedes
    every live NORMAL job, FIFO within a tier. Idle workers always take the
    first pending job in that sequence, lowest worker id first. Each bound
    worker gets one completion timer; the timer is cancelled when the worker
    is removed and is validated again when it fires.

    Attributes:
        name: Engine identifier.
        processing_time: Seconds from assignment to completion.
        stats: Frozen statistics snapshot (via property).
    """

    def __init__(self, name: str = "dispatch", processing_time: float = PROCESSING_TIME):
        """Initialize the engine.

        Args:
            name: Engine identifier.
            processing_time: Fixed seconds each job takes once assigned.

        Raises:
            ValueError: If processing_time is not positive.
        """
        super().__init__(name)

        if processing_time <= 0:
            raise ValueError(f"processing_time must be > 0, got {processing_time}")

        self._processing_time = processing_time
        self._jobs: list[Job] = []
        self._workers: list[Worker] = []
        self._next_job_id = 1
        self._next_worker_id = 1
        self._timers: dict[int, Event] = {}
        self._listeners: dict[str, Listener] = {}
        self._lock = threading.RLock()
        self._shut_down = False

        self._jobs_submitted = 0
        self._jobs_assigned = 0
        self._jobs_completed = 0
        self._jobs_requeued = 0
        self._workers_added = 0
        self._workers_removed = 0
        self._stale_completions = 0

        logger.debug(
            "[%s] DispatchEngine initialized: processing_time=%.1fs",
            name,
            processing_time,
        )

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def processing_time(self) -> float:
        """Seconds from assignment to completion."""
        return self._processing_time

    @property
    def jobs(self) -> list[Job]:
        """Every job ever submitted, in queue order."""
        return list(self._jobs)

    @property
    def workers(self) -> list[Worker]:
        """Surviving workers, in creation order."""
        return list(self._workers)

    @property
    def pending_jobs(self) -> list[Job]:
        """Jobs waiting for a worker, in queue order."""
        return [job for job in self._jobs if job.status is JobStatus.PENDING]

    @property
    def processing_jobs(self) -> list[Job]:
        """Jobs bound to a worker, in queue order."""
        return [job for job in self._jobs if job.status is JobStatus.ASSIGNED]

    @property
    def completed_jobs(self) -> list[Job]:
        """Finished jobs, in queue order."""
        return [job for job in self._jobs if job.status is JobStatus.DONE]

    @property
    def idle_workers(self) -> list[Worker]:
        """Workers without a job, lowest id first."""
        return [worker for worker in self._workers if worker.is_idle]

    @property
    def busy_workers(self) -> list[Worker]:
        """Workers holding a job, lowest id first."""
        return [worker for worker in self._workers if not worker.is_idle]

    # Scalar metrics, convenient as Probe targets.

    @property
    def pending_count(self) -> int:
        """Number of pending jobs."""
        return len(self.pending_jobs)

    @property
    def processing_count(self) -> int:
        """Number of assigned jobs."""
        return len(self.processing_jobs)

    @property
    def completed_count(self) -> int:
        """Number of finished jobs."""
        return len(self.completed_jobs)

    @property
    def worker_count(self) -> int:
        """Current pool size."""
        return len(self._workers)

    def get_job(self, job_id: int) -> Job | None:
        """Look up a job by id; None if it was never submitted."""
        for job in self._jobs:
            if job.id == job_id:
                return job
        return None

    def get_worker(self, worker_id: int) -> Worker | None:
        """Look up a surviving worker by id; None once removed."""
        for worker in self._workers:
            if worker.id == worker_id:
                return worker
        return None

    @property
    def stats(self) -> DispatchEngineStats:
        """Frozen snapshot of current statistics."""
        return DispatchEngineStats(
            jobs_submitted=self._jobs_submitted,
            jobs_assigned=self._jobs_assigned,
            jobs_completed=self._jobs_completed,
            jobs_requeued=self._jobs_requeued,
            workers_added=self._workers_added,
            workers_removed=self._workers_removed,
            stale_completions=self._stale_completions,
        )

    def snapshot(self) -> dict[str, Any]:
        """JSON-safe view of the whole engine for a presentation layer."""
        return serialize_engine(self)

    # ------------------------------------------------------------------
    # Change notification
    # ------------------------------------------------------------------

    def subscribe(self, listener: Listener) -> str:
        """Call `listener(engine)` after every settled state change.

        Returns:
            An id for unsubscribe().
        """
        listener_id = str(uuid.uuid4())
        with self._lock:
            self._listeners[listener_id] = listener
        return listener_id

    def unsubscribe(self, listener_id: str) -> None:
        with self._lock:
            self._listeners.pop(listener_id, None)

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def submit_job(self, priority: Priority | str) -> None:
        """Queue a new job and dispatch it if a worker is idle.

        Raises:
            ValueError: If priority is not a known tier.
        """
        priority = Priority.parse(priority)
        with self._mutation():
            job = Job(id=self._next_job_id, priority=priority, created_at=self.now)
            self._next_job_id += 1
            self._insert(job)
            self._jobs_submitted += 1
            logger.debug("[%s] Submitted job %d (%s)", self.name, job.id, priority.value)

    def add_worker(self) -> None:
        """Grow the pool by one idle worker."""
        with self._mutation():
            worker = Worker(id=self._next_worker_id)
            self._next_worker_id += 1
            self._workers.append(worker)
            self._workers_added += 1
            logger.info("[%s] Added worker %d (pool size %d)", self.name, worker.id, len(self._workers))

    def remove_worker(self) -> None:
        """Remove the most recently created worker, requeueing its job in place.

        Does nothing when the pool is empty.
        """
        with self._lock:
            if not self._workers:
                logger.debug("[%s] remove_worker on empty pool ignored", self.name)
                return

            with self._mutation():
                worker = self._workers.pop()
                self._workers_removed += 1
                job = worker.current_job
                worker.current_job = None
                if job is not None:
                    # Keeps its position in the sequence.
                    job.status = JobStatus.PENDING
                    self._jobs_requeued += 1
                    logger.info(
                        "[%s] Removed busy worker %d; job %d back to pending",
                        self.name,
                        worker.id,
                        job.id,
                    )
                else:
                    logger.info("[%s] Removed idle worker %d", self.name, worker.id)

    def shutdown(self) -> None:
        """Cancel every outstanding completion timer and arm no new ones.

        Job and worker state is left as-is. Commands still mutate state after
        shutdown, but assigned jobs never complete.
        """
        with self._lock:
            self._shut_down = True
            for event in self._timers.values():
                event.cancel()
            self._timers.clear()
            logger.info("[%s] Shut down; all completion timers cancelled", self.name)

    # ------------------------------------------------------------------
    # Event handling
    # ------------------------------------------------------------------

    def handle_event(self, event: Event) -> None:
        """Handle completion timers and intents delivered as events."""
        if event.event_type == COMPLETE_EVENT:
            self._complete(event)
        elif event.event_type == SUBMIT_JOB_EVENT:
            self.submit_job(event.get_context("priority") or Priority.NORMAL)
        elif event.event_type == ADD_WORKER_EVENT:
            self.add_worker()
        elif event.event_type == REMOVE_WORKER_EVENT:
            self.remove_worker()
        else:
            logger.warning("[%s] Ignoring unknown event type %r", self.name, event.event_type)
        return None

    def _complete(self, event: Event) -> None:
        worker_id = event.get_context("worker_id")
        job_id = event.get_context("job_id")

        with self._lock:
            worker = self.get_worker(worker_id)
            if worker is None or worker.current_job is None or worker.current_job.id != job_id:
                self._stale_completions += 1
                logger.debug(
                    "[%s] Stale completion for worker %s job %s ignored",
                    self.name,
                    worker_id,
                    job_id,
                )
                return

            with self._mutation():
                if self._timers.get(worker_id) is event:
                    del self._timers[worker_id]
                job = worker.current_job
                job.status = JobStatus.DONE
                job.completed_at = self.now
                worker.current_job = None
                worker.jobs_completed += 1
                self._jobs_completed += 1
                logger.debug("[%s] Worker %d completed job %d", self.name, worker.id, job.id)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    @contextmanager
    def _mutation(self) -> Iterator[None]:
        """Serialize one state change and settle it before releasing the lock."""
        with self._lock:
            yield
            self._assign()
            self._reconcile_timers()
            self._notify()

    def _insert(self, job: Job) -> None:
        if job.priority is Priority.NORMAL:
            self._jobs.append(job)
            return

        last_live_high = -1
        for idx, existing in enumerate(self._jobs):
            if existing.priority is Priority.HIGH and existing.is_live:
                last_live_high = idx
        self._jobs.insert(last_live_high + 1, job)

    def _assign(self) -> None:
        """Bind idle workers to pending jobs until one side runs out."""
        while True:
            worker = next((w for w in self._workers if w.is_idle), None)
            job = next((j for j in self._jobs if j.status is JobStatus.PENDING), None)
            if worker is None or job is None:
                return

            job.status = JobStatus.ASSIGNED
            worker.current_job = job
            self._jobs_assigned += 1
            logger.debug("[%s] Assigned job %d to worker %d", self.name, job.id, worker.id)

    def _reconcile_timers(self) -> None:
        """Start timers for newly busy workers, cancel those of idle or removed ones."""
        live_ids = {worker.id for worker in self._workers}
        for worker_id in list(self._timers):
            if worker_id not in live_ids:
                self._timers.pop(worker_id).cancel()

        for worker in self._workers:
            timer = self._timers.get(worker.id)
            if worker.current_job is None:
                if timer is not None:
                    self._timers.pop(worker.id).cancel()
                continue

            if timer is not None and timer.get_context("job_id") == worker.current_job.id:
                continue
            if timer is not None:
                self._timers.pop(worker.id).cancel()
            # Timers only start in the pass that binds the job, so the
            # deadline is always assignment time plus processing_time.
            if not self._shut_down:
                self._timers[worker.id] = self._start_timer(worker, worker.current_job)

    def _start_timer(self, worker: Worker, job: Job) -> Event:
        event = Event(
            time=self.now + Duration.from_seconds(self._processing_time),
            event_type=COMPLETE_EVENT,
            target=self,
            context={"metadata": {"worker_id": worker.id, "job_id": job.id}},
        )
        self.schedule(event)
        return event

    def _notify(self) -> None:
        for listener in list(self._listeners.values()):
            listener(self)
