"""Error types: dual struct+exception for Result and raise-based code."""

from __future__ import annotations

from typing import Any

import msgspec

__all__ = [
    'NO_MATCH_MESSAGE',
    'PREDICATE_MESSAGE',
    'Cancelled',
    'CancelledError',
    'HttpError',
    'HttpFailure',
    'NoMatchError',
    'PredicateError',
    'UnwrapError',
    'is_abort',
]

NO_MATCH_MESSAGE = 'No conditions matched'
PREDICATE_MESSAGE = 'Value did not satisfy the predicate'


# --- HTTP Errors ---


class HttpFailure(msgspec.Struct, frozen=True, gc=False):
    """HTTP request failed - struct variant for Result[T, HttpFailure]."""

    status_code: int
    message: str = ''

    def to_exception(self) -> HttpError:
        """Convert to exception for raise-based code."""
        return HttpError(self.status_code, self.message)


class HttpError(Exception):
    """HTTP request failed - exception variant."""

    def __init__(self, status_code: int, message: str = '') -> None:
        self.status_code = status_code
        self.message = message
        super().__init__(f'HTTP {status_code}: {message}' if message else f'HTTP {status_code}')

    def to_struct(self) -> HttpFailure:
        """Convert to struct for Result-based code."""
        return HttpFailure(self.status_code, self.message)


# --- Cancellation Errors ---


class Cancelled(msgspec.Struct, frozen=True, gc=False):
    """Operation aborted after its cancellation signal fired - struct variant."""

    reason: str | None = None

    def to_exception(self) -> CancelledError:
        """Convert to exception for raise-based code."""
        return CancelledError(self.reason)


class CancelledError(Exception):
    """Operation aborted after its cancellation signal fired - exception variant.

    Distinct from ``asyncio.CancelledError``: this one is an ordinary
    exception an operation raises or returns to report a cooperative abort.
    """

    def __init__(self, reason: str | None = None) -> None:
        self.reason = reason
        super().__init__(reason or 'Operation cancelled')

    def to_struct(self) -> Cancelled:
        """Convert to struct for Result-based code."""
        return Cancelled(self.reason)


def is_abort(error: object) -> bool:
    """Whether an error reports a cooperative abort.

    Recognises the library's own ``Cancelled``/``CancelledError`` and, by
    name, any error type called ``AbortError``.
    """
    if isinstance(error, (Cancelled, CancelledError)):
        return True
    return type(error).__name__ == 'AbortError'


# --- Combinator Errors ---


class NoMatchError(Exception):
    """No match rule applied to the value."""

    def __init__(self, value: Any) -> None:
        self.value = value
        super().__init__(NO_MATCH_MESSAGE)


class PredicateError(Exception):
    """A filter predicate rejected the value."""

    def __init__(self, value: Any) -> None:
        self.value = value
        super().__init__(PREDICATE_MESSAGE)


class UnwrapError(Exception):
    """Raised by ``unwrap()`` when the failure payload is not an exception."""

    def __init__(self, error: Any) -> None:
        self.error = error
        super().__init__(f'Unwrapped a failure: {error!r}')
