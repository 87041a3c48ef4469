# src/promise_mock/core/promise.py

from __future__ import annotations

"""
Promise state machine.

A promise settles synchronously, but its reactions never run synchronously:
settling hands one task to the backend the promise class is bound to, and the
reactions run when the test flushes that backend.

Reactions are stored flattened as [handler, deferred, handler, deferred, ...]
and consumed exactly once, at settle time.
"""

import inspect
import logging
from collections.abc import Iterable
from typing import Any, ClassVar, cast

from ..errors import PromiseTypeError
from .models import Deferred, Handler, PromiseStatus
from .ports import PromiseHost

logger = logging.getLogger(__name__)

PENDING = PromiseStatus.PENDING
FULFILLED = PromiseStatus.FULFILLED
REJECTED = PromiseStatus.REJECTED

_NO_THEN = object()


class _Rethrow(Exception):
    """Carries a rejection reason (of any type) through the default rejection handler."""

    def __init__(self, reason: Any) -> None:
        super().__init__(reason)
        self.reason = reason


def _identity(x: Any) -> Any:
    return x


def _rethrow(reason: Any) -> Any:
    raise _Rethrow(reason)


def _reason_of(exc: Exception) -> Any:
    return exc.reason if isinstance(exc, _Rethrow) else exc


def is_promise(x: Any) -> bool:
    """True only for genuine Promise instances (any backend, any subclass)."""
    return isinstance(x, Promise)


class Promise:
    """
    Deterministic promise whose reactions run only when the backend is flushed.

    Usage:
        p = Promise(lambda resolve, reject: resolve(1))
        p.then(lambda x: x + 1).then(seen.append)
        backend.flush(recursive=True)
    """

    # Bound by promise_mock.tasks.backend; each backend gets its own subclass.
    backend: ClassVar[PromiseHost]
    # Classes owned by a backend take the raw-construction fast path.
    _native: ClassVar[bool] = True

    _status: PromiseStatus
    _value: Any
    _on_fulfilled: list[Any] | None
    _on_rejected: list[Any] | None

    def __init__(self, resolver: Any) -> None:
        if not callable(resolver):
            raise PromiseTypeError(f"Promise resolver {resolver!r} is not callable")
        _init_state(self)
        try:
            resolver(lambda x=None: _resolve(self, x), lambda r=None: _reject(self, r))
        except Exception as exc:
            _reject(self, _reason_of(exc))

    def __repr__(self) -> str:
        name = type(self).__name__
        if self._status is PENDING:
            return f"<{name} pending>"
        return f"<{name} {self._status.name.lower()}: {self._value!r}>"

    @property
    def status(self) -> PromiseStatus:
        return self._status

    @property
    def value(self) -> Any:
        """Fulfillment value or rejection reason; None while pending."""
        return self._value

    def catch(self, on_rejected: Handler | None = None) -> Promise:
        return self.then(None, on_rejected)

    def then(self, on_fulfilled: Handler | None = None, on_rejected: Handler | None = None) -> Promise:
        """
        Register reactions and return the promise of their result.

        Fulfillment values are coerced first: a foreign thenable is assimilated
        and the handlers are re-attached to the resulting promise. Rejection
        reasons are passed through untouched.
        """
        if not callable(on_fulfilled):
            on_fulfilled = _identity
        if not callable(on_rejected):
            on_rejected = _rethrow
        cls = type(self)

        def coerce_and_fulfill(x: Any) -> Any:
            x = _coerce(cls, x)
            if x is self:
                return on_rejected(PromiseTypeError("Promise cannot be resolved with itself"))
            if is_promise(x):
                return x.then(on_fulfilled, on_rejected)
            return on_fulfilled(x)

        return _chain(self, coerce_and_fulfill, on_rejected)

    # ---- convenience ----

    @classmethod
    def resolve(cls, x: Any = None) -> Promise:
        if cls.__dict__.get("_native", False):
            return _set_state(cls.__new__(cls), FULFILLED, x)
        return cls(lambda resolve, reject: resolve(x))

    @classmethod
    def reject(cls, r: Any = None) -> Promise:
        if cls.__dict__.get("_native", False):
            return _set_state(cls.__new__(cls), REJECTED, r)
        return cls(lambda resolve, reject: reject(r))

    # ---- combinators ----

    @classmethod
    def cast(cls, x: Any) -> Promise:
        """Return x if it already is a cls promise, otherwise a cls promise for it."""
        if isinstance(x, cls):
            return x
        if is_promise(x):
            deferred = _get_deferred(cls)
            _chain(x, deferred.resolve, deferred.reject)
            return deferred.promise
        return cls.resolve(x)

    @classmethod
    def all(cls, values: Iterable[Any]) -> Promise:
        """
        Fulfill with every value in input order, or reject with the first rejection.
        """
        deferred = _get_deferred(cls)
        try:
            items = list(values)
            count = len(items)
            resolutions: list[Any] = [None] * count

            def record_at(index: int) -> Handler:
                def record(x: Any) -> None:
                    nonlocal count
                    resolutions[index] = x
                    count -= 1
                    if count == 0:
                        deferred.resolve(resolutions)

                return record

            if count == 0:
                deferred.resolve(resolutions)
            else:
                for index, value in enumerate(items):
                    cls.resolve(value).then(record_at(index), deferred.reject)
        except Exception as exc:
            deferred.reject(_reason_of(exc))
        return deferred.promise

    @classmethod
    def race(cls, values: Iterable[Any]) -> Promise:
        """Settle like whichever input settles first; ties go to input order."""
        deferred = _get_deferred(cls)
        try:
            for value in values:
                cls.resolve(value).then(deferred.resolve, deferred.reject)
        except Exception as exc:
            deferred.reject(_reason_of(exc))
        return deferred.promise


# ---- state ----

def _set_state(
        promise: Promise,
        status: PromiseStatus,
        value: Any,
        on_fulfilled: list[Any] | None = None,
        on_rejected: list[Any] | None = None,
) -> Promise:
    promise._status = status
    promise._value = value
    promise._on_fulfilled = on_fulfilled
    promise._on_rejected = on_rejected
    return promise


def _init_state(promise: Promise) -> Promise:
    return _set_state(promise, PENDING, None, [], [])


def _raw_promise(cls: type[Promise]) -> Promise:
    # Skips __init__: no resolver is needed or invoked.
    return _init_state(cls.__new__(cls))


def _get_deferred(cls: type[Promise]) -> Deferred:
    if cls.__dict__.get("_native", False):
        promise = _raw_promise(cls)
        return Deferred(
            promise=promise,
            resolve=lambda x=None: _resolve(promise, x),
            reject=lambda r=None: _reject(promise, r),
        )

    triggers: dict[str, Any] = {}

    def capture(resolve: Any, reject: Any) -> None:
        triggers["resolve"] = resolve
        triggers["reject"] = reject

    promise = cls(capture)
    return Deferred(promise=promise, resolve=triggers["resolve"], reject=triggers["reject"])


# ---- settling ----

def _resolve(promise: Promise, x: Any) -> None:
    _settle(promise, FULFILLED, x)


def _reject(promise: Promise, r: Any) -> None:
    _settle(promise, REJECTED, r)


def _settle(promise: Promise, status: PromiseStatus, value: Any) -> None:
    if promise._status is not PENDING:
        return
    reactions = promise._on_fulfilled if status is FULFILLED else promise._on_rejected
    _schedule(promise, value, reactions or [])
    _set_state(promise, status, value)


def _schedule(promise: Promise, value: Any, reactions: list[Any]) -> None:
    type(promise).backend.enqueue(_ReactionTask(value, reactions))


class _ReactionTask:
    """Queued task: run every (handler, deferred) pair against one settled value."""

    __slots__ = ("value", "reactions")

    def __init__(self, value: Any, reactions: list[Any]) -> None:
        self.value = value
        self.reactions = reactions

    def __call__(self) -> None:
        reactions = self.reactions
        for i in range(0, len(reactions), 2):
            _handle(self.value, reactions[i], reactions[i + 1])

    def __repr__(self) -> str:
        return f"<ReactionTask reactions={len(self.reactions) // 2} value={self.value!r}>"


def _handle(value: Any, handler: Handler, deferred: Deferred) -> None:
    try:
        result = handler(value)
        if result is deferred.promise:
            raise PromiseTypeError("Chaining cycle: handler returned the promise it feeds")
        if is_promise(result):
            _chain(result, deferred.resolve, deferred.reject)
        else:
            deferred.resolve(result)
    except Exception as exc:
        try:
            deferred.reject(_reason_of(exc))
        except Exception:
            logger.debug("reject failed while handling a reaction", exc_info=True)


# ---- chaining ----

def _chain(promise: Promise, on_fulfilled: Handler = _identity, on_rejected: Handler = _rethrow) -> Promise:
    """Plain chaining (flatMap): no coercion of the fulfillment value."""
    deferred = _get_deferred(type(promise))
    status = promise._status
    if status is PENDING:
        cast(list, promise._on_fulfilled).extend((on_fulfilled, deferred))
        cast(list, promise._on_rejected).extend((on_rejected, deferred))
    elif status is FULFILLED:
        _schedule(promise, promise._value, [on_fulfilled, deferred])
    else:
        _schedule(promise, promise._value, [on_rejected, deferred])
    return deferred.promise


def _coerce(cls: type[Promise], x: Any) -> Any:
    """
    Turn a foreign thenable into a cls promise; anything else is returned as is.

    Results are memoized per object in the backend's ThenableCache, so a
    thenable's `then` is invoked at most once.
    """
    # Classes are values: an unbound `then` on a class is not a thenable.
    if x is None or isinstance(x, type) or is_promise(x):
        return x

    thenables = cls.backend.thenables
    cached = thenables.get(x)
    if cached is not None:
        return cached

    try:
        then = x.then
    except Exception as exc:
        if isinstance(exc, AttributeError) and inspect.getattr_static(x, "then", _NO_THEN) is _NO_THEN:
            return x
        rejected = cls.reject(exc)
        thenables.put(x, rejected)
        return rejected

    if not callable(then):
        return x

    deferred = _get_deferred(cls)
    thenables.put(x, deferred.promise)
    try:
        then(deferred.resolve, deferred.reject)
    except Exception as exc:
        deferred.reject(_reason_of(exc))
    return deferred.promise
