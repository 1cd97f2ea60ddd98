"""@deferred decorator: lift async functions into AsyncResult producers."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import Any, overload

import wrapt

from fluent_result.async_.result import AsyncResult
from fluent_result.result import Failure, Result, Success

__all__ = ['deferred']


@overload
def deferred[**P, T](
    func: Callable[P, Awaitable[T]],
) -> Callable[P, AsyncResult[T, Exception]]: ...


@overload
def deferred[E: BaseException](
    func: None = None,
    *,
    exceptions: tuple[type[E], ...] | None = None,
) -> Callable[[Callable[..., Awaitable[Any]]], Callable[..., AsyncResult[Any, E]]]: ...


def deferred(
    func: Callable[..., Awaitable[Any]] | None = None,
    *,
    exceptions: tuple[type[Any], ...] | None = None,
) -> Any:
    """Decorator turning an async function into one that returns AsyncResult.

    The call itself does not start the coroutine; the work runs when the
    returned AsyncResult is first observed. A return value becomes Success,
    a caught exception becomes Failure.

    Can be used with or without arguments:
        @deferred
        async def risky(): ...

        @deferred(exceptions=(ValueError, TypeError))
        async def specific(): ...

    Args:
        func: The async function to wrap (when used without parentheses).
        exceptions: Tuple of exception types to capture. Defaults to (Exception,).
            Other exceptions propagate out of ``yield_()``.

    Returns:
        A wrapped function returning AsyncResult[T, E] instead of Awaitable[T].

    Example:
        ```python
        @deferred
        async def fetch(url: str) -> bytes:
            return await http_get(url)

        body = await fetch('https://example.com').map(len).yield_()
        ```
    """
    catch = exceptions if exceptions is not None else (Exception,)

    @wrapt.decorator
    def wrapper(
        wrapped: Callable[..., Awaitable[Any]],
        instance: Any,
        args: tuple[Any, ...],
        kwargs: dict[str, Any],
    ) -> AsyncResult[Any, Any]:
        async def _run() -> Result[Any, Any]:
            try:
                return Success(await wrapped(*args, **kwargs))
            except catch as e:
                return Failure(e)

        return AsyncResult(_run())

    if func is not None:
        return wrapper(func)
    return wrapper
