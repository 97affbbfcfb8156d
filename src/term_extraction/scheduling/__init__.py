"""
Parallel document scheduling with blocking backpressure.
"""

from .scheduler import DocumentScheduler, SchedulerReport, TaskResult

__all__ = ["DocumentScheduler", "SchedulerReport", "TaskResult"]
