# tests/test_logging_setup.py

from __future__ import annotations

import logging
from collections.abc import Iterator
from pathlib import Path

import pytest

from promise_mock.logging_setup import LOG_FILE_NAME, LOGGER_NAME, _ConsoleNoiseFilter, setup_logging


@pytest.fixture()
def package_logger() -> Iterator[logging.Logger]:
    logger = logging.getLogger(LOGGER_NAME)
    before = list(logger.handlers)
    level = logger.level
    yield logger
    for h in list(logger.handlers):
        if h not in before:
            logger.removeHandler(h)
            h.close()
    logger.setLevel(level)


def _record(name: str, level: int) -> logging.LogRecord:
    return logging.LogRecord(name, level, __file__, 1, "msg", None, None)


def test_file_handler_receives_package_logs(package_logger: logging.Logger, tmp_path: Path) -> None:
    setup_logging(log_dir=tmp_path)

    logging.getLogger("promise_mock.tasks.backend").info("installed for test")
    for h in package_logger.handlers:
        h.flush()

    text = (tmp_path / LOG_FILE_NAME).read_text("utf-8")
    assert "promise_mock.tasks.backend: installed for test" in text


def test_setup_is_idempotent(package_logger: logging.Logger, tmp_path: Path) -> None:
    before = len(package_logger.handlers)

    setup_logging(log_dir=tmp_path, console_level=logging.INFO)
    setup_logging(log_dir=tmp_path, console_level=logging.INFO)

    assert len(package_logger.handlers) == before + 2


def test_nothing_requested_adds_no_handlers(package_logger: logging.Logger) -> None:
    before = len(package_logger.handlers)

    setup_logging()

    assert len(package_logger.handlers) == before


def test_console_filter_quiets_task_traces() -> None:
    flt = _ConsoleNoiseFilter()

    assert flt.filter(_record("promise_mock.tasks.backend", logging.DEBUG))
    assert not flt.filter(_record("promise_mock.tasks.task_queue", logging.DEBUG))
    assert flt.filter(_record("promise_mock.tasks.task_queue", logging.WARNING))
    assert not flt.filter(_record("somebody.else", logging.ERROR))
