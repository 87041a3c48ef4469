# src/promise_mock/core/models.py

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import IntEnum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .promise import Promise

Task = Callable[[], None]
Handler = Callable[[Any], Any]


class PromiseStatus(IntEnum):
    """
    Promise lifecycle status.

    Transitions only PENDING -> FULFILLED or PENDING -> REJECTED, at most once.
    """

    PENDING = 0
    FULFILLED = 1
    REJECTED = -1


@dataclass(slots=True, frozen=True)
class Deferred:
    """A promise bundled with the two callables that settle it."""

    promise: Promise
    resolve: Callable[[Any], None]
    reject: Callable[[Any], None]
