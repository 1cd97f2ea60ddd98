"""Two-variant Result type: Success(value) | Failure(error).

Both variants are frozen, slotted dataclasses with ``__match_args__`` so a
Result can be taken apart with structural pattern matching:

Example:
    ```python
    from fluent_result.result import Failure, Success

    match outcome:
        case Success(value):
            print('got', value)
        case Failure(error):
            print('failed with', error)
    ```
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal, TypeGuard

__all__ = [
    'Failure',
    'Result',
    'Success',
    'is_failure',
    'is_success',
]


@dataclass(slots=True, frozen=True)
class Success[T]:
    """Successful outcome holding a value of type T.

    Attributes:
        value: The success payload.
    """

    value: T
    __match_args__ = ('value',)

    def is_success(self) -> Literal[True]:
        """Return True, this is the success variant."""
        return True

    def is_failure(self) -> Literal[False]:
        """Return False, this is not the failure variant."""
        return False

    def __repr__(self) -> str:
        return f'Success({self.value!r})'


@dataclass(slots=True, frozen=True)
class Failure[E]:
    """Failed outcome holding an error payload of type E.

    The payload is not required to be an exception; any value can describe
    a domain failure.

    Attributes:
        error: The error payload.
    """

    error: E
    __match_args__ = ('error',)

    def is_success(self) -> Literal[False]:
        """Return False, this is the failure variant."""
        return False

    def is_failure(self) -> Literal[True]:
        """Return True, this is the failure variant."""
        return True

    def __repr__(self) -> str:
        return f'Failure({self.error!r})'


type Result[T, E] = Success[T] | Failure[E]


def is_success[T](r: Success[T] | Failure[Any]) -> TypeGuard[Success[T]]:
    """Narrow a Result to Success.

    Args:
        r: The Result to check.

    Returns:
        True if r is a Success.
    """
    return isinstance(r, Success)


def is_failure[E](r: Success[Any] | Failure[E]) -> TypeGuard[Failure[E]]:
    """Narrow a Result to Failure.

    Args:
        r: The Result to check.

    Returns:
        True if r is a Failure.
    """
    return isinstance(r, Failure)
