"""
Unit tests for the document scheduler.

Tests coverage:
- results and submission order
- per-document failure isolation
- max_docs
- blocking backpressure (submission waits for a free slot)
- global timeout (blocked submission and final join)
"""

import threading
import time

import pytest

from term_extraction.exceptions import DocumentAnnotationError, SchedulingTimeoutError
from term_extraction.models.document import Document
from term_extraction.scheduling.scheduler import DocumentScheduler


def docs(n):
    return [Document(id=f"d{i}", contents=str(i)) for i in range(n)]


@pytest.mark.unit
class TestDocumentScheduler:
    """Tests for DocumentScheduler.run."""

    def test_runs_every_document(self):
        """Test every document is processed once, results in submission order."""
        scheduler = DocumentScheduler(num_workers=4, queue_size=2, timeout_seconds=10)
        report = scheduler.run(docs(20), lambda d: int(d.contents) * 2)
        assert [r.task_id for r in report.results] == [f"d{i}" for i in range(20)]
        assert [r.result for r in report.results] == [i * 2 for i in range(20)]
        assert report.succeeded == 20
        assert report.failed_ids == []

    def test_failure_isolated(self):
        """Test a failing document does not stop the others."""

        def task(document):
            if document.id == "d3":
                raise ValueError("cannot tag")
            return document.id

        report = DocumentScheduler(num_workers=2, timeout_seconds=10).run(docs(6), task)
        assert report.failed_ids == ["d3"]
        assert report.succeeded == 5
        error = report.failures[0].error
        assert isinstance(error, DocumentAnnotationError)
        assert isinstance(error.__cause__, ValueError)
        assert "cannot tag" in error.message

    def test_max_docs(self):
        """Test only the first max_docs documents are submitted."""
        report = DocumentScheduler(num_workers=2, timeout_seconds=10).run(
            docs(10), lambda d: d.id, max_docs=3
        )
        assert [r.task_id for r in report.results] == ["d0", "d1", "d2"]

    def test_defaults_from_settings(self):
        """Test worker count and queue size default to settings."""
        from term_extraction.config import settings

        scheduler = DocumentScheduler()
        assert scheduler.num_workers == settings.default_num_threads
        assert scheduler.queue_size == settings.scheduler_queue_size

    def test_negative_queue_size(self):
        """Test a negative queue size is rejected."""
        with pytest.raises(ValueError):
            DocumentScheduler(num_workers=1, queue_size=-1)


@pytest.mark.slow
class TestBackpressureAndTimeout:
    """Tests for blocking submission and the global timeout."""

    def test_submission_blocks_when_full(self):
        """Test the producer stops pulling documents while all slots are busy."""
        release = threading.Event()
        pulled = []

        def source():
            for document in docs(6):
                pulled.append(document.id)
                yield document

        def task(document):
            release.wait(timeout=10)
            return document.id

        scheduler = DocumentScheduler(num_workers=1, queue_size=1, timeout_seconds=30)
        outcome = {}
        runner = threading.Thread(target=lambda: outcome.update(report=scheduler.run(source(), task)))
        runner.start()

        deadline = time.monotonic() + 5
        while len(pulled) < 3 and time.monotonic() < deadline:
            time.sleep(0.01)
        time.sleep(0.2)
        # Two slots in use, the third document waits for a slot
        assert len(pulled) == 3

        release.set()
        runner.join(timeout=10)
        assert outcome["report"].succeeded == 6

    def test_timeout_on_join(self):
        """Test a run exceeding the timeout raises SchedulingTimeoutError."""
        release = threading.Event()
        scheduler = DocumentScheduler(num_workers=2, queue_size=10, timeout_seconds=0.2)
        try:
            with pytest.raises(SchedulingTimeoutError) as exc_info:
                scheduler.run(docs(2), lambda d: release.wait(timeout=10))
            assert exc_info.value.pending >= 1
        finally:
            release.set()

    def test_timeout_while_blocked(self):
        """Test the timeout also bounds waiting for a submission slot."""
        release = threading.Event()
        scheduler = DocumentScheduler(num_workers=1, queue_size=0, timeout_seconds=0.2)
        try:
            with pytest.raises(SchedulingTimeoutError):
                scheduler.run(docs(3), lambda d: release.wait(timeout=10))
        finally:
            release.set()
