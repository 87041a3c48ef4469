# src/promise_mock/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole library.
- Everything has a default; nothing is required at import time.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

ENV_PREFIX = "PROMISE_MOCK"


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _load_dotenv_if_available() -> None:
    """Load .env locally if python-dotenv is installed. Safe no-op otherwise."""
    try:
        from dotenv import load_dotenv  # type: ignore
    except Exception:
        return
    load_dotenv(override=False)


_load_dotenv_if_available()


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_optional_path(name: str) -> Optional[Path]:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return None
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- Logging ----
    log_level: str
    log_dir: Optional[Path]

    # ---- Install target ----
    # Dotted module name whose `Promise` attribute gets swapped by install.
    global_scope: str

    # ---- Scope lifecycle ----
    verify_on_leave: bool

    # ---- Diagnostics ----
    trace_tasks: bool

    @staticmethod
    def from_env() -> "Settings":
        log_level = _env(_k("LOG_LEVEL"), "INFO").strip().upper() or "INFO"
        log_dir = _env_optional_path(_k("LOG_DIR"))

        global_scope = _env(_k("GLOBAL_SCOPE"), "builtins").strip() or "builtins"

        verify_on_leave = _env_bool(_k("VERIFY_ON_LEAVE"), True)
        trace_tasks = _env_bool(_k("TRACE_TASKS"), False)

        return Settings(
            log_level=log_level,
            log_dir=log_dir,
            global_scope=global_scope,
            verify_on_leave=verify_on_leave,
            trace_tasks=trace_tasks,
        )


SETTINGS = Settings.from_env()


def get_settings() -> Settings:
    return SETTINGS
