# src/promise_mock/tasks/backend.py

from __future__ import annotations

"""
Promise backend.

Owns the task queue a promise class defers its reactions to, and the
install/restore discipline that swaps a scope's `Promise` for the mock while
a test runs. Each backend binds its own Promise subclass, so independent
backends never share queued work.
"""

import contextlib
import importlib
import logging
from collections.abc import Iterator, MutableMapping
from typing import Any

from ..config import Settings, get_settings
from ..core.models import Task
from ..core.promise import Promise
from ..core.thenables import ThenableCache
from ..errors import AlreadyInstalledError, NotInstalledError
from .task_queue import TaskQueue

logger = logging.getLogger(__name__)

_MISSING = object()
# What a scope held before install when it had no `Promise` at all.


def _read_promise(scope: Any) -> Any:
    if isinstance(scope, MutableMapping):
        return scope.get("Promise", _MISSING)
    return getattr(scope, "Promise", _MISSING)


def _write_promise(scope: Any, value: Any) -> None:
    if isinstance(scope, MutableMapping):
        if value is _MISSING:
            scope.pop("Promise", None)
        else:
            scope["Promise"] = value
        return
    if value is _MISSING:
        with contextlib.suppress(AttributeError):
            delattr(scope, "Promise")
    else:
        setattr(scope, "Promise", value)


class PromiseBackend:
    """
    Controllable replacement for the host's microtask scheduler.

    Test-facing surface:
    - flush(recursive=False): run one wave of queued tasks, or drain to quiescence
    - install_as_global_promise(scope) / restore_original_promise()
    - assert_quiescent(), clear()
    - scope(): context manager running the enter/leave/error hooks in order
    """

    def __init__(
            self,
            settings: Settings | None = None,
            *,
            promise_type: type[Promise] | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.queue = TaskQueue(trace=self.settings.trace_tasks)
        self.thenables = ThenableCache()

        if promise_type is None:
            promise_type = type(
                "Promise",
                (Promise,),
                {"backend": self, "_native": True, "__module__": Promise.__module__},
            )
        else:
            promise_type.backend = self
        self.Promise: type[Promise] = promise_type

        self._global: Any = None
        self._installed_scope: Any = None
        self._original: Any = _MISSING

    def __repr__(self) -> str:
        return f"<PromiseBackend queued={len(self.queue)} installed={self.is_installed}>"

    # ---- queue ----

    def enqueue(self, task: Task) -> None:
        self.queue.enqueue(task)

    def flush(self, recursive: bool = False) -> PromiseBackend:
        self.queue.flush(recursive)
        return self

    def assert_quiescent(self) -> None:
        self.queue.assert_quiescent()

    def clear(self) -> None:
        self.queue.clear()
        self.thenables.clear()

    # ---- install / restore ----

    @property
    def is_installed(self) -> bool:
        return self._installed_scope is not None

    def set_global(self, scope: Any) -> None:
        """Choose the default scope used by install_as_global_promise()."""
        self._global = scope

    def _default_scope(self) -> Any:
        if self._global is None:
            self._global = importlib.import_module(self.settings.global_scope)
        return self._global

    def install_as_global_promise(self, scope: Any = None) -> None:
        if self.is_installed:
            raise AlreadyInstalledError(
                "Promise mock is already installed; call restore_original_promise() first"
            )
        scope = self._default_scope() if scope is None else scope
        self._original = _read_promise(scope)
        _write_promise(scope, self.Promise)
        self._installed_scope = scope
        logger.debug("installed mock Promise on %r", scope)

    def restore_original_promise(self) -> None:
        scope = self._installed_scope
        if scope is None:
            raise NotInstalledError(
                "No original Promise recorded; restore_original_promise() "
                "should only be called after install_as_global_promise()"
            )
        _write_promise(scope, self._original)
        self._installed_scope = None
        self._original = _MISSING
        logger.debug("restored original Promise on %r", scope)

    # ---- scope manager hooks ----

    def on_enter(self, scope: Any = None) -> None:
        self.install_as_global_promise(scope)

    def on_leave(self) -> None:
        self.restore_original_promise()
        try:
            if self.settings.verify_on_leave:
                self.assert_quiescent()
        finally:
            self.clear()

    def on_error(self, exc: BaseException) -> None:
        logger.error("error inside promise mock scope: %r", exc)
        raise exc

    @contextlib.contextmanager
    def scope(self, target: Any = None) -> Iterator[PromiseBackend]:
        """
        Run a block with the mock installed on target (or the default scope).

        On normal exit: restore, assert quiescent, clear.
        If the block raises: restore, clear, then report and re-raise the
        block's own error (the quiescence check would only mask it).
        """
        self.on_enter(target)
        try:
            yield self
        except BaseException as exc:
            self.restore_original_promise()
            self.clear()
            self.on_error(exc)
        else:
            self.on_leave()


default_backend = PromiseBackend(promise_type=Promise)
