"""Aggregation and resilience combinators for AsyncResult.

- zip_results: observe many computations concurrently, keyed Success or first Failure
- retry: rebuild and re-run a computation with multiplicative backoff
- timeout: race a computation against a timer with cooperative cancellation
- time_execution: measure and log how long a computation takes

The same functions are exposed as ``AsyncResult.zip``, ``AsyncResult.retry``,
``AsyncResult.timeout`` and ``AsyncResult.time_execution``.
"""

from __future__ import annotations

import time
from collections.abc import Callable, Sequence
from typing import Any

import anyio

from fluent_result._logging import get_logger
from fluent_result.async_.cancel import CancellationSignal
from fluent_result.async_.result import AsyncResult
from fluent_result.errors import is_abort
from fluent_result.result import Failure, Result, Success
from fluent_result.sinks import resolve_sink
from fluent_result.types import NamedComputation, RetryPolicy

__all__ = [
    'retry',
    'time_execution',
    'timeout',
    'zip_results',
]

logger = get_logger(__name__)


async def _observe[T, E](computation: AsyncResult[T, E]) -> Result[T, Any]:
    try:
        return await computation.yield_()
    except Exception as exc:
        return Failure(exc)


async def _build_and_observe[T, E](factory: Callable[[], AsyncResult[T, E]]) -> Result[T, Any]:
    try:
        computation = factory()
    except Exception as exc:
        return Failure(exc)
    return await _observe(computation)


def _as_named(entry: Any) -> NamedComputation[Any, Any]:
    if isinstance(entry, NamedComputation):
        return entry
    if isinstance(entry, AsyncResult):
        return NamedComputation(entry)
    msg = f'zip() expects NamedComputation or AsyncResult entries, got {type(entry).__name__}'
    raise TypeError(msg)


def zip_results(*computations: Any) -> AsyncResult[dict[str, Any], Any]:
    """Combine computations into one keyed Success, or the first Failure.

    Accepts either a single sequence or a variadic spread of entries. Each
    entry is a ``NamedComputation`` or a bare ``AsyncResult`` (unnamed).
    Unnamed entries are keyed ``m<index>``.

    All computations are started in one anyio task group before any result
    is inspected. Failures are picked by position, not by completion time;
    every other outcome is discarded.

    Args:
        *computations: The entries, or one sequence of them.

    Returns:
        AsyncResult of ``{name: value}``, or the first Failure by position.

    Raises:
        TypeError: If an entry is neither a NamedComputation nor an AsyncResult.

    Example:
        ```python
        combined = await AsyncResult.zip(
            NamedComputation(AsyncResult.of(1), 'a'),
            NamedComputation(AsyncResult.of(2), 'b'),
        ).yield_()
        assert combined == Success({'a': 1, 'b': 2})
        ```
    """
    if len(computations) == 1 and isinstance(computations[0], Sequence):
        raw_entries = list(computations[0])
    else:
        raw_entries = list(computations)
    entries = [_as_named(entry) for entry in raw_entries]

    async def _zipped() -> Result[dict[str, Any], Any]:
        results: list[Result[Any, Any] | None] = [None] * len(entries)

        async with anyio.create_task_group() as tg:

            async def run_one(i: int, computation: AsyncResult[Any, Any]) -> None:
                results[i] = await _observe(computation)

            for i, entry in enumerate(entries):
                tg.start_soon(run_one, i, entry.computation)

        combined: dict[str, Any] = {}
        for i, (entry, result) in enumerate(zip(entries, results, strict=True)):
            assert result is not None
            match result:
                case Success(value):
                    combined[entry.name or f'm{i}'] = value
                case Failure():
                    return result
        return Success(combined)

    return AsyncResult(_zipped())


def retry[T, E](
    operation_factory: Callable[[], AsyncResult[T, E]],
    policy: RetryPolicy[E],
) -> AsyncResult[T, E]:
    """Run a computation, rebuilding it after every Failure until it succeeds.

    The factory is called fresh for each attempt: ``policy.times`` retries
    follow the first attempt, so at most ``times + 1`` attempts run. Between
    attempts ``policy.on_error(error, attempt)`` is called (attempts count
    from 1) and the task sleeps ``delay`` seconds, the delay being
    multiplied by ``backoff_factor`` each time. The sleep is not cancelled
    by the library.

    A factory that raises counts as a failed attempt carrying the exception.
    ``on_error`` is skipped for a ``Failure(None)``, which carries no error.
    An ``on_error`` that raises is logged and does not stop the retries.

    Args:
        operation_factory: Builds the computation for one attempt.
        policy: Retry bounds and delays.

    Returns:
        AsyncResult settled to the first Success or the last Failure.

    Example:
        ```python
        result = await AsyncResult.retry(
            lambda: fetch_quote(),
            RetryPolicy(times=3, delay=0.2, backoff_factor=2.0),
        ).yield_()
        ```
    """

    async def _retrying() -> Result[T, E]:
        delay = policy.delay
        attempt = 1
        while True:
            result = await _build_and_observe(operation_factory)
            if isinstance(result, Success):
                return result
            if attempt > policy.times:
                logger.info('retry_exhausted', attempts=attempt, error=repr(result.error))
                return result
            logger.debug('retry_attempt_failed', attempt=attempt, delay=delay, error=repr(result.error))
            if policy.on_error is not None and result.error is not None:
                try:
                    policy.on_error(result.error, attempt)
                except Exception:
                    logger.warning('retry_on_error_raised', attempt=attempt, exc_info=True)
            await anyio.sleep(delay)
            delay *= policy.backoff_factor
            attempt += 1

    return AsyncResult(_retrying())


def timeout[T, E](
    operation: Callable[[CancellationSignal], AsyncResult[T, E]],
    duration: float,
    timeout_error: E,
) -> AsyncResult[T, E]:
    """Race a computation against a timer.

    ``operation`` receives a fresh ``CancellationSignal``. Outcomes:

    - The timer fires first: the signal is cancelled and the result is
      Failure(timeout_error). The operation is not terminated; it keeps
      running until it checks the signal or settles on its own.
    - The operation settles first with Success or with an ordinary Failure
      (an exception raised by the operation included): the timer is
      cancelled and that outcome wins.
    - The operation settles with an abort (see ``errors.is_abort``): it is
      ignored and the timer decides, so a self-reported abort never masks
      the timeout error.

    Args:
        operation: Builds the computation from the cancellation signal.
        duration: Timer length in seconds.
        timeout_error: Error payload used when the timer wins.

    Returns:
        AsyncResult with the race outcome.
    """

    async def _raced() -> Result[T, E]:
        signal = CancellationSignal()
        try:
            computation = operation(signal)
            # From here on the computation runs in its own task; losing the race never cancels it.
            computation._start()
        except Exception as exc:
            return Failure(exc)  # type: ignore[arg-type]
        outcome: Result[T, E] | None = None

        async with anyio.create_task_group() as tg:

            async def run_timer() -> None:
                nonlocal outcome
                await anyio.sleep(duration)
                signal.cancel('timeout')
                if outcome is None:
                    logger.info('timeout_fired', duration=duration)
                    outcome = Failure(timeout_error)
                # Only stops run_operation's wait.
                tg.cancel_scope.cancel()

            async def run_operation() -> None:
                nonlocal outcome
                result = await _observe(computation)
                if isinstance(result, Failure) and is_abort(result.error):
                    logger.debug('timeout_operation_aborted', error=repr(result.error))
                    return
                if outcome is None:
                    outcome = result
                    tg.cancel_scope.cancel()

            tg.start_soon(run_timer)
            tg.start_soon(run_operation)

        assert outcome is not None
        return outcome

    return AsyncResult(_raced())


async def time_execution[T, E](
    operation: Callable[[], AsyncResult[T, E]],
    sink: Any = None,
    formatter: Callable[[float, Result[T, E]], Any] | None = None,
) -> Result[T, E]:
    """Observe ``operation()`` and log how long it took.

    The default message is ``Execution took <ms>ms``, followed by
    `` - Error: <error>`` on Failure. A custom ``formatter`` receives the
    duration in seconds and the Result.

    Args:
        operation: Builds the computation to time.
        sink: Object with a ``log(message)`` method; defaults to the configured sink.
        formatter: Builds the message from ``(duration_seconds, result)``.

    Returns:
        The raw Result, not an AsyncResult.
    """
    start = time.perf_counter()
    result = await _build_and_observe(operation)
    duration = time.perf_counter() - start

    try:
        if formatter is not None:
            message = formatter(duration, result)
        else:
            message = f'Execution took {duration * 1000:.2f}ms'
            if isinstance(result, Failure):
                message += f' - Error: {result.error}'
        resolve_sink(sink).log(message)
    except Exception:
        logger.warning('time_execution_log_failed', sink=repr(sink), exc_info=True)
    return result
