# src/promise_mock/tasks/task_queue.py

from __future__ import annotations

"""
Controllable task queue.

Stands in for the host's microtask queue: tasks are only stored on enqueue and
run when the test flushes, either one wave at a time or until empty.
"""

import logging
from collections import deque

from ..core.models import Task
from ..errors import EmptyQueueError, PendingTasksError

logger = logging.getLogger(__name__)


class TaskQueue:
    """
    FIFO of zero-argument callables.

    The underlying deque is created lazily on the first enqueue and dropped
    again by clear().
    """

    def __init__(self, *, trace: bool = False) -> None:
        self._queue: deque[Task] | None = None
        self._trace = trace

    def __len__(self) -> int:
        return len(self._queue) if self._queue else 0

    def pending(self) -> tuple[Task, ...]:
        """Snapshot of queued tasks, front first."""
        return tuple(self._queue or ())

    def enqueue(self, task: Task) -> None:
        if self._queue is None:
            self._queue = deque()
        self._queue.append(task)
        if self._trace:
            logger.debug("enqueue task=%r queued=%d", task, len(self._queue))

    def flush(self, recursive: bool = False) -> int:
        """
        Run queued tasks and return how many ran.

        Single-wave (default): run exactly the tasks queued when the call
        started. Tasks they enqueue stay for the next flush.
        Recursive: keep running until the queue is observed empty. A handler
        that always re-enqueues work makes this loop forever.
        """
        queue = self._queue
        if not queue:
            raise EmptyQueueError()

        ran = 0
        if not recursive:
            for _ in range(len(queue)):
                self._run(queue.popleft())
                ran += 1
        else:
            while queue:
                self._run(queue.popleft())
                ran += 1

        logger.debug("flush recursive=%s ran=%d remaining=%d", recursive, ran, len(queue))
        return ran

    def assert_quiescent(self) -> None:
        count = len(self)
        if count:
            raise PendingTasksError(count)

    def clear(self) -> None:
        dropped = len(self)
        self._queue = None
        if dropped:
            logger.debug("clear dropped=%d", dropped)

    def _run(self, task: Task) -> None:
        if self._trace:
            logger.debug("run task=%r", task)
        task()
