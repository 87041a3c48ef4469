# src/promise_mock/errors.py

"""
Exception types raised by the promise mock and its task queue backend.

Usage errors (empty flush, restore without install, leftover tasks) are raised
synchronously to the test. Protocol violations are PromiseTypeError and are
routed into the rejection channel, except for a non-callable resolver.
"""

from __future__ import annotations


class PromiseMockError(Exception):
    """Base class for every error raised by promise_mock."""


class EmptyQueueError(PromiseMockError):
    """Raised when flush() is called with no queued tasks."""

    def __init__(self, message: str = "Nothing to flush!") -> None:
        super().__init__(message)


class NotInstalledError(PromiseMockError):
    """Raised when the original Promise is restored before anything was installed."""


class AlreadyInstalledError(PromiseMockError):
    """Raised when installing while a previous install is still active."""


class PendingTasksError(PromiseMockError):
    """Raised when tasks are still queued at a point that requires quiescence."""

    def __init__(self, count: int) -> None:
        self.count = count
        super().__init__(f"Pending tasks to be flushed: {count}")


class PromiseTypeError(PromiseMockError, TypeError):
    """Protocol violation: bad resolver, chaining cycle or self-coercion."""
