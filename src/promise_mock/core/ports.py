# src/promise_mock/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The promise state machine depends on a task sink rather than a concrete
queue, so any backend that can defer a callable can drive it.
"""

from typing import Protocol

from .models import Task
from .thenables import ThenableCache


class TaskSink(Protocol):
    """Where settled promises hand their reaction tasks."""
    def enqueue(self, task: Task) -> None: ...


class PromiseHost(TaskSink, Protocol):
    """Everything a promise class needs from the backend it is bound to."""
    thenables: ThenableCache

