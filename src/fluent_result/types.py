"""Supporting types for AsyncResult combinators."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

import msgspec

if TYPE_CHECKING:
    from fluent_result.async_.result import AsyncResult

__all__ = [
    'FoldOutcome',
    'LogSink',
    'MatchMode',
    'MatchOptions',
    'MatchRule',
    'NamedComputation',
    'RetryPolicy',
]


@runtime_checkable
class LogSink(Protocol):
    """Anything with a single-argument ``log`` method."""

    def log(self, message: Any, /) -> Any: ...


class MatchMode(Enum):
    """How ``AsyncResult.match`` treats multiple matching rules."""

    FIRST = 'first'
    EVERY = 'every'


@dataclass(frozen=True, slots=True)
class MatchRule[T]:
    """A condition over the success value and the action to run when it holds.

    Attributes:
        condition: Predicate over the value; may return an awaitable.
        action: Produces the replacement value, a Result, an AsyncResult,
            or an awaitable of a plain value.
    """

    condition: Callable[[T], bool | Awaitable[bool]]
    action: Callable[[T], Any]


@dataclass(frozen=True, slots=True)
class MatchOptions:
    """Options for ``AsyncResult.match``.

    Attributes:
        mode: FIRST returns the first matching action's result. EVERY runs
            every matching action and keeps the original value.
        continue_if_no_match: Pass the value through when nothing matched
            instead of failing with ``NoMatchError``.
        continue_on_error: Pass the original value through when a condition
            or action raises instead of failing with the exception.
    """

    mode: MatchMode = MatchMode.FIRST
    continue_if_no_match: bool = False
    continue_on_error: bool = False


@dataclass(frozen=True, slots=True)
class NamedComputation[T, E]:
    """An AsyncResult paired with the key it gets in ``AsyncResult.zip``."""

    computation: AsyncResult[T, E]
    name: str | None = None


@dataclass(frozen=True, slots=True)
class RetryPolicy[E]:
    """Retry configuration for ``AsyncResult.retry``.

    Attributes:
        times: Retries after the first attempt.
        delay: Seconds to wait before the first retry.
        backoff_factor: Multiplier applied to the delay after every retry.
        on_error: Called with ``(error, attempt)`` for each failed attempt
            that will be retried and carries a non-None error; attempts
            count from 1.
    """

    times: int = 1
    delay: float = 1.0
    backoff_factor: float = 1.0
    on_error: Callable[[E, int], Any] | None = None

    def __post_init__(self) -> None:
        if self.times < 0:
            raise ValueError('RetryPolicy.times must be >= 0')
        if self.delay < 0:
            raise ValueError('RetryPolicy.delay must be >= 0')
        if self.backoff_factor <= 0:
            raise ValueError('RetryPolicy.backoff_factor must be > 0')


class FoldOutcome(msgspec.Struct, frozen=True):
    """Plain outcome of ``AsyncResult.fold``: exactly one field is set."""

    result: Any = msgspec.UNSET
    error: Any = msgspec.UNSET

    def is_success(self) -> bool:
        """Whether the fold produced a result rather than an error."""
        return self.error is msgspec.UNSET
