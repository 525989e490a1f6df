"""
Completion Scheduler

Delayed "mark this game complete" jobs. A game is scheduled when it is
created, to run at the end of its day, and cancelled when it finishes through
normal play. The ``CompletionWorker`` polls the job store from a background
thread and hands due jobs to the game service.
"""

import datetime
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, Dict, Optional

from pymongo import ASCENDING

from ..utils.game_logger import game_logger


@dataclass
class CompletionJob:
    game_id: str
    run_at: datetime.datetime
    attempts: int = 0


class CompletionScheduler(ABC):
    """Job store interface shared by the game service and the worker."""

    @abstractmethod
    def schedule(self, game_id: str, run_at: datetime.datetime) -> None:
        """Run the completion job for ``game_id`` no earlier than ``run_at``."""

    @abstractmethod
    def cancel(self, game_id: str) -> None:
        ...

    @abstractmethod
    def claim_due(self, now: datetime.datetime) -> Optional[CompletionJob]:
        """Remove and return one job whose ``run_at`` has passed, if any."""

    @abstractmethod
    def retry(self, job: CompletionJob, run_at: datetime.datetime) -> None:
        """Put a failed job back with its attempt count increased."""

    @abstractmethod
    def pending_count(self) -> int:
        ...


class MongoJobStore(CompletionScheduler):
    """
    Jobs live in the ``completion_jobs`` collection, keyed by game id.
    Claiming is a ``find_one_and_delete`` so two workers never run the same job.
    """

    def __init__(self, database):
        self.jobs_collection = database.completion_jobs
        self.jobs_collection.create_index([("run_at", ASCENDING)])

    def schedule(self, game_id: str, run_at: datetime.datetime) -> None:
        self.jobs_collection.update_one(
            {"_id": game_id},
            {"$set": {"run_at": run_at, "attempts": 0}},
            upsert=True
        )

    def cancel(self, game_id: str) -> None:
        self.jobs_collection.delete_one({"_id": game_id})

    def claim_due(self, now: datetime.datetime) -> Optional[CompletionJob]:
        doc = self.jobs_collection.find_one_and_delete(
            {"run_at": {"$lte": now}},
            sort=[("run_at", ASCENDING)]
        )
        if doc is None:
            return None
        return CompletionJob(game_id=doc["_id"], run_at=doc["run_at"], attempts=doc.get("attempts", 0))

    def retry(self, job: CompletionJob, run_at: datetime.datetime) -> None:
        self.jobs_collection.update_one(
            {"_id": job.game_id},
            {"$set": {"run_at": run_at, "attempts": job.attempts + 1}},
            upsert=True
        )

    def pending_count(self) -> int:
        return self.jobs_collection.count_documents({})


class InMemoryJobStore(CompletionScheduler):
    """Process-local job store, paired with InMemoryGameRepository."""

    def __init__(self):
        self._jobs: Dict[str, CompletionJob] = {}
        self._lock = threading.Lock()

    def schedule(self, game_id: str, run_at: datetime.datetime) -> None:
        with self._lock:
            self._jobs[game_id] = CompletionJob(game_id=game_id, run_at=run_at)

    def cancel(self, game_id: str) -> None:
        with self._lock:
            self._jobs.pop(game_id, None)

    def claim_due(self, now: datetime.datetime) -> Optional[CompletionJob]:
        with self._lock:
            due = [job for job in self._jobs.values() if job.run_at <= now]
            if not due:
                return None
            job = min(due, key=lambda j: j.run_at)
            del self._jobs[job.game_id]
            return job

    def retry(self, job: CompletionJob, run_at: datetime.datetime) -> None:
        with self._lock:
            self._jobs[job.game_id] = CompletionJob(game_id=job.game_id, run_at=run_at, attempts=job.attempts + 1)

    def get(self, game_id: str) -> Optional[CompletionJob]:
        with self._lock:
            return self._jobs.get(game_id)

    def pending_count(self) -> int:
        with self._lock:
            return len(self._jobs)


class CompletionWorker:
    """
    Background worker that runs due completion jobs.

    Args:
        scheduler: Job store to claim jobs from
        handler: Called with the game id; must be idempotent
        poll_seconds: Delay between polls of the job store
        retry_seconds: Delay before a failed job is tried again
        max_attempts: Failed jobs are dropped after this many attempts
        clock: Returns the current (server-local) time
    """

    def __init__(self, scheduler: CompletionScheduler, handler: Callable[[str], object],
                 poll_seconds: float = 30, retry_seconds: float = 60, max_attempts: int = 5,
                 clock: Callable[[], datetime.datetime] = datetime.datetime.now):
        self.scheduler = scheduler
        self.handler = handler
        self.poll_seconds = poll_seconds
        self.retry_seconds = retry_seconds
        self.max_attempts = max_attempts
        self.clock = clock
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None

    def run_pending(self, now: Optional[datetime.datetime] = None) -> int:
        """Run every job due at ``now``. Returns how many jobs were claimed."""
        now = now or self.clock()
        processed = 0

        while True:
            job = self.scheduler.claim_due(now)
            if job is None:
                break
            processed += 1

            try:
                self.handler(job.game_id)
            except Exception as e:
                if job.attempts + 1 >= self.max_attempts:
                    game_logger.logger.error(
                        f"Completion job for game {job.game_id} failed {job.attempts + 1} times, giving up: {e}"
                    )
                    continue
                game_logger.logger.warning(f"Completion job for game {job.game_id} failed, retrying: {e}")
                self.scheduler.retry(job, now + datetime.timedelta(seconds=self.retry_seconds))

        return processed

    def _run(self):
        game_logger.logger.info(f"Completion worker started - polling every {self.poll_seconds} seconds")
        while not self._stop_event.is_set():
            try:
                self.run_pending()
            except Exception as e:
                game_logger.logger.error(f"Error in completion worker: {e}")
            self._stop_event.wait(self.poll_seconds)

    def start(self) -> threading.Thread:
        self._stop_event.clear()
        self._thread = threading.Thread(target=self._run, name="completion-worker", daemon=True)
        self._thread.start()
        return self._thread

    def stop(self, timeout: Optional[float] = None):
        self._stop_event.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None
