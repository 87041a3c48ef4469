# src/promise_mock/core/thenables.py

from __future__ import annotations

import weakref
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .promise import Promise


class ThenableCache:
    """
    Identity-keyed memo of coerced thenables.

    Maps a foreign object to the promise its coercion produced, so coercing
    the same object twice yields the same promise. The foreign object itself
    is never touched:
    - weak-referenceable objects are held weakly and dropped when they die
    - everything else is held strongly until clear()
    """

    def __init__(self) -> None:
        self._entries: dict[int, tuple[Callable[[], Any], Promise]] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, obj: Any) -> Promise | None:
        entry = self._entries.get(id(obj))
        if entry is None:
            return None
        target, promise = entry
        # id() can be reused after the original object is gone.
        if target() is not obj:
            return None
        return promise

    def put(self, obj: Any, promise: Promise) -> None:
        key = id(obj)
        try:
            target: Callable[[], Any] = weakref.ref(obj, lambda _ref: self._entries.pop(key, None))
        except TypeError:
            target = _strong(obj)
        self._entries[key] = (target, promise)

    def clear(self) -> None:
        self._entries.clear()


def _strong(obj: Any) -> Callable[[], Any]:
    return lambda: obj
