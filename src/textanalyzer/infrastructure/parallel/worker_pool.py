"""Worker pool that executes analysis batches concurrently."""

from concurrent import futures
from concurrent.futures import CancelledError, Future, ThreadPoolExecutor
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Sequence, Set
import os
import threading
import time

from ...domain.exceptions import EngineShutdownError, SchedulingInterrupted
from ...domain.models.analysis import AnalysisFailure, AnalysisOutcome
from ..logging import TextAnalyzerLogger
from .task import AnalysisTask


def default_pool_width() -> int:
    """Number of CPUs available to this process."""
    count_cpus = getattr(os, "process_cpu_count", None) or os.cpu_count
    return count_cpus() or 1


@dataclass
class WorkerConfig:
    """Configuration for the execution engine."""
    max_workers: Optional[int] = None  # None = one worker per CPU
    grace_period_seconds: float = 60.0
    thread_name_prefix: str = "analysis-worker"

    @property
    def pool_width(self) -> int:
        return self.max_workers or default_pool_width()


class EngineState(str, Enum):
    """Lifecycle of an execution engine."""
    CREATED = "created"
    RUNNING = "running"  # Batch being dispatched
    DRAINING = "draining"  # Batch dispatched, awaiting completion
    IDLE = "idle"
    SHUTDOWN = "shutdown"


# Type aliases for callbacks
OnTaskStartCallback = Callable[[int, AnalysisTask], None]
OnTaskCompleteCallback = Callable[[int, AnalysisOutcome], None]


class ExecutionEngine:
    """
    Runs batches of analysis tasks on a fixed-size thread pool.

    ``execute_all`` returns one outcome per submitted task, in submission
    order. Each worker writes the result slot addressed by its task's
    index, and the calling thread blocks once on the whole batch.
    Batches are executed one at a time per engine.
    """

    def __init__(self, config: Optional[WorkerConfig] = None):
        """
        Initialize the engine and its thread pool.

        Args:
            config: Engine configuration (defaults to one worker per CPU)
        """
        self.config = config or WorkerConfig()
        self.max_workers = self.config.pool_width
        self.logger = TextAnalyzerLogger.get_instance()

        self._executor = ThreadPoolExecutor(
            max_workers=self.max_workers,
            thread_name_prefix=self.config.thread_name_prefix,
        )
        self._state = EngineState.CREATED
        # Reentrant: done-callbacks of already finished futures run inline
        self._state_lock = threading.RLock()
        self._batch_lock = threading.Lock()
        self._cancel_event = threading.Event()
        self._in_flight: Set[Future] = set()
        self._shutdown_result: Optional[bool] = None
        self._shutdown_done = threading.Event()

        # Callbacks
        self._on_task_start: Optional[OnTaskStartCallback] = None
        self._on_task_complete: Optional[OnTaskCompleteCallback] = None

        # Statistics
        self._stats = {
            "batches": 0,
            "tasks_succeeded": 0,
            "tasks_failed": 0,
            "tasks_cancelled": 0,
            "total_duration": 0.0,
        }

        self.logger.info(
            "Execution engine initialized",
            extra={"max_workers": self.max_workers}
        )

    @property
    def state(self) -> EngineState:
        with self._state_lock:
            return self._state

    def _set_state(self, state: EngineState):
        with self._state_lock:
            if self._state != EngineState.SHUTDOWN:
                self._state = state

    def set_callbacks(
        self,
        on_task_start: Optional[OnTaskStartCallback] = None,
        on_task_complete: Optional[OnTaskCompleteCallback] = None,
    ):
        """
        Set callback functions for progress reporting.

        Callbacks run on worker threads. Exceptions they raise are logged
        and otherwise ignored.

        Args:
            on_task_start: Called with (index, task) before a task runs
            on_task_complete: Called with (index, outcome) after a task runs
        """
        self._on_task_start = on_task_start
        self._on_task_complete = on_task_complete

    def execute_all(self, tasks: Sequence[AnalysisTask]) -> List[AnalysisOutcome]:
        """
        Run a batch of tasks concurrently and wait for all of them.

        Args:
            tasks: Tasks in submission order

        Returns:
            One outcome per task, aligned with the input order

        Raises:
            EngineShutdownError: If the engine has been shut down
            SchedulingInterrupted: If the waiting thread is interrupted
        """
        tasks = list(tasks)

        with self._batch_lock:
            batch_cancel = threading.Event()
            slots: List[Optional[AnalysisOutcome]] = [None] * len(tasks)
            pending: List[Future] = []

            with self._state_lock:
                if self._state == EngineState.SHUTDOWN:
                    raise EngineShutdownError("Execution engine has been shut down")
                if not tasks:
                    return []

                self._state = EngineState.RUNNING
                for index, task in enumerate(tasks):
                    future = self._executor.submit(
                        self._run_slot, slots, index, task, batch_cancel
                    )
                    self._in_flight.add(future)
                    future.add_done_callback(self._discard_in_flight)
                    pending.append(future)

            self.logger.info(
                "Batch dispatched",
                extra={"total_tasks": len(tasks), "max_workers": self.max_workers}
            )

            self._set_state(EngineState.DRAINING)
            start_time = time.monotonic()

            try:
                self._wait_for_batch(pending)
            except KeyboardInterrupt as e:
                # Queued slots see the flag and resolve to cancelled outcomes
                batch_cancel.set()
                self._set_state(EngineState.IDLE)
                self.logger.warning(
                    "Batch interrupted; pending tasks cancelled",
                    extra={"total_tasks": len(tasks)}
                )
                raise SchedulingInterrupted(
                    "Interrupted while waiting for analysis batch",
                    outcomes=list(slots),
                ) from e

            # Slots left empty belong to tasks that never ran or died
            # with a non-Exception error; no worker touches them any more.
            for index, future in enumerate(pending):
                if slots[index] is None:
                    slots[index] = self._unfinished_outcome(tasks[index], future)

            self._record_batch(slots, time.monotonic() - start_time)
            self._set_state(EngineState.IDLE)
            return slots

    def _wait_for_batch(self, pending: List[Future]):
        """Block until every future in the batch is done."""
        futures.wait(pending, return_when=futures.ALL_COMPLETED)

    def _run_slot(
        self,
        slots: List[Optional[AnalysisOutcome]],
        index: int,
        task: AnalysisTask,
        batch_cancel: threading.Event,
    ):
        """Run one task on a worker thread and store its outcome at ``index``."""
        if batch_cancel.is_set() or self._cancel_event.is_set():
            slots[index] = self._cancelled_outcome(task)
            return

        self._notify(self._on_task_start, index, task)
        outcome = task()
        slots[index] = outcome
        self._notify(self._on_task_complete, index, outcome)

    def _notify(self, callback: Optional[Callable[..., Any]], index: int, value: Any):
        if callback is None:
            return
        try:
            callback(index, value)
        except Exception as e:
            self.logger.warning(
                "Progress callback failed",
                extra={"task_index": index, "error": str(e)}
            )

    def _discard_in_flight(self, future: Future):
        with self._state_lock:
            self._in_flight.discard(future)

    @staticmethod
    def _cancelled_outcome(task: AnalysisTask) -> AnalysisFailure:
        return AnalysisFailure(
            kind=task.kind,
            failure_reason="Task cancelled before it started",
            cause=CancelledError(),
            label=task.label,
        )

    def _unfinished_outcome(self, task: AnalysisTask, future: Future) -> AnalysisFailure:
        if future.cancelled():
            return self._cancelled_outcome(task)

        error = future.exception()
        return AnalysisFailure(
            kind=task.kind,
            failure_reason=str(error) or type(error).__name__,
            cause=error,
            label=task.label,
        )

    def _record_batch(self, outcomes: List[AnalysisOutcome], duration: float):
        succeeded = sum(1 for o in outcomes if o.succeeded)
        cancelled = sum(
            1 for o in outcomes
            if not o.succeeded and isinstance(o.cause, CancelledError)
        )
        failed = len(outcomes) - succeeded - cancelled

        self._stats["batches"] += 1
        self._stats["tasks_succeeded"] += succeeded
        self._stats["tasks_failed"] += failed
        self._stats["tasks_cancelled"] += cancelled
        self._stats["total_duration"] += duration

        self.logger.info(
            "Batch complete",
            extra={
                "tasks_succeeded": succeeded,
                "tasks_failed": failed,
                "tasks_cancelled": cancelled,
                "duration_seconds": round(duration, 4),
            }
        )

    def get_stats(self) -> Dict[str, Any]:
        """
        Get engine statistics.

        Returns:
            Dictionary with statistics
        """
        return dict(self._stats)

    def shutdown(self, grace_period: Optional[float] = None) -> bool:
        """
        Stop accepting batches and wait for in-flight tasks.

        When the grace period elapses the cancel flag is raised: queued
        tasks resolve to "cancelled" outcomes without running, and running
        ones are left to finish on their own, so a batch still waiting in
        ``execute_all`` always gets a full result list. Later calls wait for
        the first one to finish and return its result.

        Args:
            grace_period: Seconds to wait (defaults to the configured value)

        Returns:
            True if every in-flight task finished within the grace period

        Raises:
            SchedulingInterrupted: If the waiting thread is interrupted
        """
        with self._state_lock:
            first_call = self._state != EngineState.SHUTDOWN
            self._state = EngineState.SHUTDOWN
            in_flight = set(self._in_flight)

        if not first_call:
            self._shutdown_done.wait()
            return bool(self._shutdown_result)

        if grace_period is None:
            grace_period = self.config.grace_period_seconds

        # Queued work still runs after this; only the cancel flag stops it
        self._executor.shutdown(wait=False)

        try:
            not_done = self._wait_for_in_flight(in_flight, grace_period)
        except KeyboardInterrupt as e:
            self._cancel_event.set()
            self._finish_shutdown(False)
            self.logger.warning("Shutdown interrupted; remaining tasks cancelled")
            raise SchedulingInterrupted(
                "Interrupted while waiting for engine shutdown"
            ) from e

        if not_done:
            self._cancel_event.set()
            self.logger.warning(
                "Shutdown grace period elapsed; remaining tasks cancelled",
                extra={
                    "grace_period_seconds": grace_period,
                    "unfinished_tasks": len(not_done),
                }
            )
            self._finish_shutdown(False)
            return False

        self.logger.info("Execution engine shut down")
        self._finish_shutdown(True)
        return True

    def _wait_for_in_flight(self, in_flight: Set[Future], timeout: float) -> Set[Future]:
        """Wait up to ``timeout`` seconds. Returns the futures still unfinished."""
        _, not_done = futures.wait(in_flight, timeout=timeout)
        return not_done

    def _finish_shutdown(self, result: bool):
        self._shutdown_result = result
        self._shutdown_done.set()

    def __enter__(self) -> "ExecutionEngine":
        return self

    def __exit__(self, exc_type, exc, tb):
        self.shutdown()

    def __repr__(self) -> str:
        return f"<ExecutionEngine: {self.max_workers} workers, {self.state.value}>"
