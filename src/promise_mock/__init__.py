"""
Deterministic, manually-steppable promises for tests.

Components:
- core/promise.py: Promise state machine, chaining, thenable coercion, combinators
- tasks/task_queue.py: FIFO of deferred reaction tasks with wave/recursive flush
- tasks/backend.py: PromiseBackend (queue + install/restore + scope manager)
- pytest_plugin.py: `promise_backend` fixture
"""

from __future__ import annotations

from .core.models import Deferred, PromiseStatus
from .core.promise import Promise, is_promise
from .errors import (
    AlreadyInstalledError,
    EmptyQueueError,
    NotInstalledError,
    PendingTasksError,
    PromiseMockError,
    PromiseTypeError,
)
from .tasks.backend import PromiseBackend, default_backend

__all__ = [
    "AlreadyInstalledError",
    "Deferred",
    "EmptyQueueError",
    "NotInstalledError",
    "PendingTasksError",
    "Promise",
    "PromiseBackend",
    "PromiseMockError",
    "PromiseStatus",
    "PromiseTypeError",
    "default_backend",
    "is_promise",
]
