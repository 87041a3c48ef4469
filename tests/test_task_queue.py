# tests/test_task_queue.py

from __future__ import annotations

import logging

import pytest

from promise_mock.errors import EmptyQueueError, PendingTasksError
from promise_mock.tasks.task_queue import TaskQueue


def test_enqueue_never_runs_synchronously() -> None:
    queue = TaskQueue()
    ran: list[str] = []

    queue.enqueue(lambda: ran.append("a"))

    assert ran == []
    assert len(queue) == 1


def test_flush_empty_queue_is_an_error() -> None:
    queue = TaskQueue()

    with pytest.raises(EmptyQueueError, match="Nothing to flush!"):
        queue.flush()
    with pytest.raises(EmptyQueueError):
        queue.flush(recursive=True)


def test_flush_runs_tasks_in_fifo_order() -> None:
    queue = TaskQueue()
    ran: list[int] = []
    for i in range(3):
        queue.enqueue(lambda i=i: ran.append(i))

    assert queue.flush() == 3
    assert ran == [0, 1, 2]
    assert len(queue) == 0


def test_single_wave_leaves_tasks_enqueued_during_the_wave() -> None:
    queue = TaskQueue()
    ran: list[str] = []

    def first() -> None:
        ran.append("first")
        queue.enqueue(lambda: ran.append("second"))

    queue.enqueue(first)

    assert queue.flush() == 1
    assert ran == ["first"]
    assert len(queue) == 1

    assert queue.flush() == 1
    assert ran == ["first", "second"]


def test_recursive_flush_drains_to_quiescence() -> None:
    queue = TaskQueue()
    ran: list[int] = []

    def chain(n: int) -> None:
        ran.append(n)
        if n < 4:
            queue.enqueue(lambda: chain(n + 1))

    queue.enqueue(lambda: chain(0))

    assert queue.flush(recursive=True) == 5
    assert ran == [0, 1, 2, 3, 4]
    queue.assert_quiescent()


def test_assert_quiescent_reports_pending_count() -> None:
    queue = TaskQueue()
    queue.enqueue(lambda: None)
    queue.enqueue(lambda: None)

    with pytest.raises(PendingTasksError) as exc_info:
        queue.assert_quiescent()
    assert exc_info.value.count == 2


def test_clear_drops_everything() -> None:
    queue = TaskQueue()
    queue.enqueue(lambda: None)

    queue.clear()

    assert len(queue) == 0
    assert queue.pending() == ()
    with pytest.raises(EmptyQueueError):
        queue.flush()


def test_pending_is_a_snapshot() -> None:
    queue = TaskQueue()
    task = lambda: None  # noqa: E731
    queue.enqueue(task)

    snapshot = queue.pending()
    queue.flush()

    assert snapshot == (task,)
    assert queue.pending() == ()


def test_task_errors_propagate_to_the_flusher() -> None:
    queue = TaskQueue()

    def boom() -> None:
        raise RuntimeError("task failed")

    queue.enqueue(boom)

    with pytest.raises(RuntimeError, match="task failed"):
        queue.flush()


def test_trace_logs_every_task(caplog: pytest.LogCaptureFixture) -> None:
    queue = TaskQueue(trace=True)
    queue.enqueue(lambda: None)

    with caplog.at_level(logging.DEBUG, logger="promise_mock.tasks.task_queue"):
        queue.flush()

    messages = [r.getMessage() for r in caplog.records]
    assert any(m.startswith("run task=") for m in messages)
    assert any("flush recursive=False ran=1 remaining=0" in m for m in messages)
