"""Two-variant outcome type used for every API call.

A call either succeeds with a value (:class:`Success`) or fails with a
human-readable description (:class:`Failure`).  API failures reported by the
server are always represented this way, never as exceptions, so callers can
inspect and recover from them.

Usage::

    from actiongram.core.result import Failure, Success, success

    outcome = success(41).map(lambda n: n + 1)      # Success(42)
    outcome.bind(lambda n: Failure("too big"))      # Failure("too big")
    Failure("offline").default(0)                   # 0
"""

from __future__ import annotations

import dataclasses
from typing import Any, Callable, Generic, TypeVar, Union

T = TypeVar("T")
U = TypeVar("U")

# Failure string reported when a fetch returned an empty result set.
NO_RESULTS = "no results available"


@dataclasses.dataclass(frozen=True, slots=True)
class Success(Generic[T]):
    """Successful outcome carrying *value*."""

    value: T

    @property
    def is_success(self) -> bool:
        return True

    def default(self, fallback: Any) -> T:
        """Return the carried value; *fallback* is ignored."""
        return self.value

    def bind(self, func: Callable[[T], Result[U]]) -> Result[U]:
        """Feed the value into *func*, which produces the next outcome."""
        return func(self.value)

    def map(self, func: Callable[[T], U]) -> Result[U]:
        return Success(func(self.value))


@dataclasses.dataclass(frozen=True, slots=True)
class Failure:
    """Failed outcome carrying the error description."""

    error: str

    @property
    def is_success(self) -> bool:
        return False

    def default(self, fallback: U) -> U:
        return fallback

    def bind(self, func: Callable[[Any], Result[U]]) -> Result[U]:
        """Short-circuit: *func* is never called."""
        return self

    def map(self, func: Callable[[Any], U]) -> Result[U]:
        return self


Result = Union[Success[T], Failure]


def success(value: T) -> Success[T]:
    """Lift a plain value into a :class:`Success`."""
    return Success(value)


def first(items: list[T]) -> Result[T]:
    """Return the head of *items*, or :data:`NO_RESULTS` when empty."""
    if not items:
        return Failure(NO_RESULTS)
    return Success(items[0])
