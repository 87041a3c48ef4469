# src/promise_mock/pytest_plugin.py

"""
pytest integration (registered through the `pytest11` entry point).

Provides the `promise_backend` fixture: a fresh PromiseBackend installed for
the duration of one test, restored and verified quiescent at teardown.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator

import pytest

from .config import get_settings
from .logging_setup import setup_logging
from .tasks.backend import PromiseBackend


def pytest_configure(config: pytest.Config) -> None:
    settings = get_settings()
    if settings.log_dir is not None:
        file_level = getattr(logging, settings.log_level, logging.INFO)
        setup_logging(log_dir=settings.log_dir, file_level=file_level)


@pytest.fixture()
def promise_backend() -> Iterator[PromiseBackend]:
    """
    Backend whose Promise is installed on the configured global scope.

    Use `promise_backend.Promise` to build promises and
    `promise_backend.flush()` to advance them. Leaving tasks unflushed fails
    the test at teardown.
    """
    backend = PromiseBackend()
    with backend.scope():
        yield backend
