"""
=============================================================================
THREAD POOL
=============================================================================

Workers pull connection tasks from one bounded queue.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                          ThreadPool                                 │
    │                                                                     │
    │   submit() ──► [ task | task | task | ... ]  (maxsize=queue_size)   │
    │                      │       │       │                              │
    │                      ▼       ▼       ▼                              │
    │                  Worker-0 Worker-1 Worker-N   (min..max workers)    │
    └─────────────────────────────────────────────────────────────────────┘

submit() never blocks the accept loop: a full queue returns False and the
server answers 503 instead.

Shutdown uses the poison pill pattern: one None per worker is put on the
queue and a worker exits when it takes one.

=============================================================================
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Optional
import logging
import queue
import threading
import time


logger = logging.getLogger(__name__)


class WorkerState(Enum):
    IDLE = "idle"
    BUSY = "busy"
    STOPPED = "stopped"


@dataclass
class Task:
    """A deferred call: func(*args, **kwargs)."""

    func: Callable[..., Any]
    args: tuple = ()
    kwargs: dict = field(default_factory=dict)
    submitted_at: float = field(default_factory=time.time)


class Worker(threading.Thread):
    """
    Worker thread.

    Loops on the queue until it gets a poison pill or shutdown() is called.
    A failing task is logged and the worker carries on.
    """

    def __init__(self, task_queue: queue.Queue, worker_id: int, idle_timeout: float = 60.0):
        # daemon: never keep the interpreter alive on exit
        super().__init__(name=f"Worker-{worker_id}", daemon=True)
        self.task_queue = task_queue
        self.worker_id = worker_id
        self.idle_timeout = idle_timeout
        self.state = WorkerState.IDLE
        self._shutdown = threading.Event()

        self.tasks_completed = 0
        self.tasks_failed = 0

    def run(self):
        logger.debug(f"Worker {self.worker_id} started")

        while not self._shutdown.is_set():
            try:
                task = self.task_queue.get(timeout=self.idle_timeout)
            except queue.Empty:
                continue

            try:
                if task is None:
                    break
                self._execute_task(task)
            finally:
                self.task_queue.task_done()

        self.state = WorkerState.STOPPED
        logger.debug(f"Worker {self.worker_id} stopped")

    def _execute_task(self, task: Task):
        self.state = WorkerState.BUSY
        start_time = time.time()

        try:
            task.func(*task.args, **task.kwargs)
            self.tasks_completed += 1
            logger.debug(
                f"Worker {self.worker_id} completed task in {time.time() - start_time:.3f}s"
            )
        except Exception as e:
            self.tasks_failed += 1
            logger.exception(
                f"Worker {self.worker_id} task failed after {time.time() - start_time:.3f}s: {e}"
            )
        finally:
            self.state = WorkerState.IDLE

    def shutdown(self):
        self._shutdown.set()


class ThreadPool:
    """
    Bounded pool of worker threads.

    Args:
        min_workers: Workers started up front.
        max_workers: Upper bound when scaling up under load.
        queue_size: Maximum number of waiting tasks.
        idle_timeout: How often an idle worker rechecks for shutdown.
    """

    def __init__(
        self,
        min_workers: int = 4,
        max_workers: int = 16,
        queue_size: int = 100,
        idle_timeout: float = 1.0,
    ):
        self.min_workers = min_workers
        self.max_workers = max_workers
        self.max_queue_size = queue_size
        self.idle_timeout = idle_timeout

        self._task_queue: "queue.Queue[Optional[Task]]" = queue.Queue(maxsize=queue_size)
        self._workers: list[Worker] = []
        self._lock = threading.Lock()  # Guards _workers
        self._started = False
        self._shutdown = False
        self._next_worker_id = 0

    def start(self):
        if self._started:
            return

        logger.info(f"Starting thread pool with {self.min_workers} workers")
        with self._lock:
            for _ in range(self.min_workers):
                self._add_worker()
        self._started = True

    def _add_worker(self) -> Worker:
        """Start one more worker. Caller holds _lock."""
        worker = Worker(
            task_queue=self._task_queue,
            worker_id=self._next_worker_id,
            idle_timeout=self.idle_timeout,
        )
        self._next_worker_id += 1
        self._workers.append(worker)
        worker.start()
        return worker

    def submit(self, func: Callable[..., Any], *args, **kwargs) -> bool:
        """
        Queue func(*args, **kwargs) for a worker.

        Returns:
            True if queued, False if the queue is full.

        Raises:
            RuntimeError: If the pool isn't running.
        """
        if not self._started or self._shutdown:
            raise RuntimeError("Thread pool is not running")

        try:
            self._task_queue.put_nowait(Task(func=func, args=args, kwargs=kwargs))
        except queue.Full:
            logger.warning(f"Task queue full ({self.max_queue_size} waiting)")
            return False

        self._maybe_scale_up()
        return True

    def _maybe_scale_up(self):
        """Add a worker when every worker is busy and tasks are waiting."""
        with self._lock:
            if len(self._workers) >= self.max_workers:
                return
            if self.busy_workers < len(self._workers):
                return
            if self._task_queue.qsize() == 0:
                return
            logger.debug(
                f"Scaling up: {len(self._workers)} -> {len(self._workers) + 1} workers"
            )
            self._add_worker()

    def shutdown(self, wait: bool = True, timeout: Optional[float] = None):
        """
        Stop all workers.

        Args:
            wait: Let queued tasks finish first.
            timeout: Upper bound on the wait for queued tasks.
        """
        if not self._started:
            return

        logger.info("Shutting down thread pool...")
        self._shutdown = True

        if wait:
            deadline = time.time() + timeout if timeout else None
            while self._task_queue.unfinished_tasks:
                if deadline and time.time() > deadline:
                    logger.warning("Shutdown timeout, forcing stop")
                    break
                time.sleep(0.05)

        for worker in self._workers:
            worker.shutdown()
            try:
                self._task_queue.put_nowait(None)
            except queue.Full:
                pass  # The shutdown event stops it on its next idle tick

        for worker in self._workers:
            worker.join(timeout=2.0)

        self._workers.clear()
        self._started = False
        logger.info("Thread pool shutdown complete")

    # ─── Monitoring ───────────────────────────────────────────────────────

    @property
    def active_workers(self) -> int:
        return sum(1 for w in self._workers if w.state != WorkerState.STOPPED)

    @property
    def busy_workers(self) -> int:
        return sum(1 for w in self._workers if w.state == WorkerState.BUSY)

    @property
    def queue_size(self) -> int:
        """Tasks currently waiting."""
        return self._task_queue.qsize()

    @property
    def stats(self) -> dict:
        return {
            "workers": {
                "total": len(self._workers),
                "active": self.active_workers,
                "busy": self.busy_workers,
            },
            "tasks": {
                "queued": self.queue_size,
                "completed": sum(w.tasks_completed for w in self._workers),
                "failed": sum(w.tasks_failed for w in self._workers),
            },
        }
