# src/promise_mock/logging_setup.py

from __future__ import annotations

import logging
import sys
from pathlib import Path

LOGGER_NAME = "promise_mock"
LOG_FILE_NAME = "promise_mock.log"

_HANDLER_TAG = "_promise_mock_handler"


class _ConsoleNoiseFilter(logging.Filter):
    """
    Keep the console readable while tests flush many tasks:
    - allow most promise_mock logs
    - but suppress per-task trace records (task queue) unless WARNING+
    """

    def filter(self, record: logging.LogRecord) -> bool:
        name = record.name

        if name.startswith(f"{LOGGER_NAME}.tasks.task_queue"):
            return record.levelno >= logging.WARNING

        return name.startswith(LOGGER_NAME)


def setup_logging(
    *,
    log_dir: str | Path | None = None,
    console_level: int | None = None,
    file_level: int = logging.DEBUG,
) -> None:
    """
    Configure the promise_mock logger with:
    - Console handler (only if console_level is given): filtered
    - File handler (only if log_dir is given): full logs for debugging

    Only the package logger is touched, never the root logger, so test runners
    keep capturing as usual. Calling again replaces the handlers added before.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(logging.DEBUG)

    # Remove handlers from a previous call to avoid duplicates.
    for h in list(logger.handlers):
        if getattr(h, _HANDLER_TAG, False):
            logger.removeHandler(h)
            h.close()

    fmt = logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    if console_level is not None:
        ch = logging.StreamHandler(sys.stderr)
        ch.setLevel(console_level)
        ch.setFormatter(fmt)
        ch.addFilter(_ConsoleNoiseFilter())
        setattr(ch, _HANDLER_TAG, True)
        logger.addHandler(ch)

    if log_dir is not None:
        log_dir = Path(log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(str(log_dir / LOG_FILE_NAME), encoding="utf-8")
        fh.setLevel(file_level)
        fh.setFormatter(fmt)
        setattr(fh, _HANDLER_TAG, True)
        logger.addHandler(fh)
