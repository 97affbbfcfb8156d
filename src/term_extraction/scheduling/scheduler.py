"""
Bounded parallel execution of per-document tasks.

Documents are handed to a fixed-size thread pool. Submission is throttled by
a bounded semaphore holding ``num_workers + queue_size`` slots: the
submitting thread waits for a slot before every submission, and a slot is
released when a task finishes. Nothing is ever rejected or dropped; a slow
pool simply slows the producer down.

Usage:
    scheduler = DocumentScheduler(num_workers=4)
    report = scheduler.run(corpus, process_document)
    for result in report.failures:
        print(f"{result.task_id} failed: {result.error}")
"""

import threading
import time
from concurrent.futures import Future, ThreadPoolExecutor, wait
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Optional

import structlog

from ..config import settings
from ..exceptions import DocumentAnnotationError, SchedulingTimeoutError
from ..models.document import Document

logger = structlog.get_logger(__name__)


@dataclass
class TaskResult:
    """
    Outcome of one document task.

    Attributes:
        task_id: Document id
        success: True if the task completed without exception
        result: Return value of the task (if success)
        error: DocumentAnnotationError wrapping the failure (if not success)
    """

    task_id: str
    success: bool
    result: Any = None
    error: Optional[Exception] = None


@dataclass
class SchedulerReport:
    """All task outcomes of one run, in submission order."""

    results: List[TaskResult] = field(default_factory=list)
    elapsed_seconds: float = 0.0

    @property
    def failures(self) -> List[TaskResult]:
        return [r for r in self.results if not r.success]

    @property
    def failed_ids(self) -> List[str]:
        return [r.task_id for r in self.results if not r.success]

    @property
    def succeeded(self) -> int:
        return sum(1 for r in self.results if r.success)


class DocumentScheduler:
    """
    Runs one task per document on a bounded thread pool.

    A failing task is logged and reported but never stops the other tasks.
    The timeout covers the whole run (waiting for submission slots and the
    final join); when it expires, pending tasks are cancelled and
    SchedulingTimeoutError is raised.

    Args:
        num_workers: Pool size (default ``settings.default_num_threads``)
        queue_size: Extra in-flight tasks beyond the workers
            (default ``settings.scheduler_queue_size``)
        timeout_seconds: Global timeout (default ``settings.scheduler_timeout_seconds``)
    """

    def __init__(
        self,
        num_workers: Optional[int] = None,
        queue_size: Optional[int] = None,
        timeout_seconds: Optional[float] = None,
    ):
        self.num_workers = num_workers or settings.default_num_threads
        self.queue_size = settings.scheduler_queue_size if queue_size is None else queue_size
        self.timeout_seconds = (
            settings.scheduler_timeout_seconds if timeout_seconds is None else timeout_seconds
        )
        if self.num_workers < 1:
            raise ValueError("num_workers must be at least 1")
        if self.queue_size < 0:
            raise ValueError("queue_size must not be negative")

    def run(
        self,
        documents: Iterable[Document],
        task: Callable[[Document], Any],
        max_docs: Optional[int] = None,
    ) -> SchedulerReport:
        """
        Run ``task`` over every document.

        Args:
            documents: Documents to process (consumed lazily)
            task: Function applied to each document in a worker thread
            max_docs: Stop after submitting this many documents

        Returns:
            SchedulerReport with one TaskResult per submitted document

        Raises:
            SchedulingTimeoutError: If the run exceeds the timeout
        """
        start = time.monotonic()
        deadline = start + self.timeout_seconds
        slots = threading.BoundedSemaphore(self.num_workers + self.queue_size)
        futures: Dict[Future, str] = {}

        def release_slot(_future: Future) -> None:
            slots.release()

        executor = ThreadPoolExecutor(
            max_workers=self.num_workers, thread_name_prefix="term-extraction"
        )
        timed_out = False
        try:
            for index, document in enumerate(documents):
                if max_docs is not None and index >= max_docs:
                    break
                if not slots.acquire(timeout=max(0.0, deadline - time.monotonic())):
                    timed_out = True
                    break
                future = executor.submit(task, document)
                future.add_done_callback(release_slot)
                futures[future] = document.id

            if not timed_out:
                _, not_done = wait(futures, timeout=max(0.0, deadline - time.monotonic()))
                timed_out = bool(not_done)
        finally:
            if timed_out:
                executor.shutdown(wait=False, cancel_futures=True)
            else:
                executor.shutdown(wait=True)

        if timed_out:
            pending = sum(1 for f in futures if not f.done())
            logger.error(
                "scheduler_timeout",
                timeout_seconds=self.timeout_seconds,
                submitted=len(futures),
                pending=pending,
            )
            raise SchedulingTimeoutError(self.timeout_seconds, pending)

        report = SchedulerReport(
            results=[self._collect(future, task_id) for future, task_id in futures.items()],
            elapsed_seconds=time.monotonic() - start,
        )
        logger.info(
            "documents_processed",
            submitted=len(futures),
            succeeded=report.succeeded,
            failed=len(report.failures),
            num_workers=self.num_workers,
            elapsed_seconds=round(report.elapsed_seconds, 3),
        )
        return report

    @staticmethod
    def _collect(future: Future, task_id: str) -> TaskResult:
        error = future.exception()
        if error is None:
            return TaskResult(task_id=task_id, success=True, result=future.result())

        if not isinstance(error, DocumentAnnotationError):
            wrapped = DocumentAnnotationError(task_id, str(error))
            wrapped.__cause__ = error
            error = wrapped
        logger.warning(
            "document_failed",
            document_id=task_id,
            error=error.message,
            cause=type(error.__cause__).__name__ if error.__cause__ else None,
        )
        return TaskResult(task_id=task_id, success=False, error=error)
