# tests/conftest.py

from __future__ import annotations

from types import SimpleNamespace

import pytest

from promise_mock.config import Settings
from promise_mock.tasks.backend import PromiseBackend


@pytest.fixture()
def settings() -> Settings:
    """
    Explicit settings for unit tests.

    Built directly rather than read from the environment, to keep tests
    isolated from whatever PROMISE_MOCK_* variables the runner has set.
    """
    return Settings(
        log_level="INFO",
        log_dir=None,
        global_scope="builtins",
        verify_on_leave=True,
        trace_tasks=False,
    )


@pytest.fixture()
def backend(settings: Settings) -> PromiseBackend:
    """Fresh backend, not installed anywhere."""
    return PromiseBackend(settings)


@pytest.fixture()
def P(backend: PromiseBackend) -> type:
    """The Promise class bound to the test's backend."""
    return backend.Promise


@pytest.fixture()
def scope() -> SimpleNamespace:
    """A stand-in global scope that already has a native Promise."""

    class NativePromise:
        pass

    return SimpleNamespace(Promise=NativePromise)
