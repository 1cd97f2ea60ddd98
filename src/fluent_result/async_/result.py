"""AsyncResult: a deferred Result with a fluent combinator surface.

AsyncResult wraps an Awaitable[Result[T, E]] and offers combinators that
chain further deferred work while short-circuiting on Failure. Every
combinator returns a new AsyncResult; none of them raises. The only ways
back into raise-based code are ``unwrap()`` and ``fold()``.

Example:
    ```python
    async def fetch_user(id: int) -> Result[User, Exception]:
        ...

    user_name = await (
        AsyncResult(fetch_user(1))
        .filter(lambda u: u.active)
        .map(lambda u: u.name)
        .recover(lambda _: 'anonymous')
        .yield_()
    )
    ```
"""

from __future__ import annotations

import asyncio
import inspect
from collections.abc import Awaitable, Callable, Generator, Iterable, Sequence
from typing import TYPE_CHECKING, Any, Final

import aiologic

from fluent_result._logging import get_logger
from fluent_result.errors import HttpError, HttpFailure, NoMatchError, PredicateError, UnwrapError
from fluent_result.result import Failure, Result, Success
from fluent_result.sinks import resolve_sink
from fluent_result.types import FoldOutcome, MatchMode, MatchOptions, MatchRule

if TYPE_CHECKING:
    from fluent_result.async_.cancel import CancellationSignal
    from fluent_result.types import RetryPolicy

__all__ = ['AsyncResult']

logger = get_logger(__name__)

_PENDING: Final = object()

# Strong references to running computations; the loop only keeps weak ones.
_running: set[asyncio.Task[None]] = set()


def _describe(result: Result[Any, Any]) -> str:
    match result:
        case Success(value):
            return f'Success: {value}'
        case Failure(error):
            return f'Error: {error}'


async def _settle(value: Any) -> Any:
    """Await ``value`` if it is a plain awaitable; AsyncResults are left alone."""
    if inspect.isawaitable(value) and not isinstance(value, AsyncResult):
        return await value
    return value


async def _adopt(value: Any) -> Result[Any, Any]:
    """Turn whatever a handler returned into a Result.

    AsyncResults are observed, Results are taken as-is, awaitables are
    awaited (a raise becomes Failure) and anything else becomes Success.
    """
    if isinstance(value, AsyncResult):
        return await value.yield_()
    if isinstance(value, (Success, Failure)):
        return value
    if inspect.isawaitable(value):
        try:
            resolved = await value
        except Exception as exc:
            return Failure(exc)
        if isinstance(resolved, (AsyncResult, Success, Failure)):
            return await _adopt(resolved)
        return Success(resolved)
    return Success(value)


async def _delegate(handler: Callable[[Any], Any], error: Any) -> Result[Any, Any]:
    try:
        replacement = handler(error)
    except Exception as exc:
        return Failure(exc)
    return await _adopt(replacement)


class AsyncResult[T, E]:
    """Deferred computation that settles to a ``Result[T, E]``.

    The wrapped awaitable is awaited at most once. The first observation
    starts it in its own task and every observer (``await``, ``yield_()``,
    combinators, several ``zip`` entries) waits on an ``aiologic.Event``
    for the memoised Result. Cancelling an observer only stops that
    observer; the computation keeps running and later observers still get
    its Result.

    An instance nobody observes is legal; its work simply never runs.

    Attributes:
        _awaitable: The awaitable producing the Result.
        _settled: The memoised Result, or a sentinel while pending.
    """

    __slots__ = ('_awaitable', '_done', '_raised', '_settled', '_task')

    def __init__(self, awaitable: Awaitable[Result[T, E]]) -> None:
        """Create an AsyncResult from an awaitable of a Result.

        Args:
            awaitable: An awaitable that produces a Result[T, E].
        """
        self._awaitable = awaitable
        self._done = aiologic.Event()
        self._raised: BaseException | None = None
        self._settled: Any = _PENDING
        self._task: asyncio.Task[None] | None = None

    # ---- Construction ----

    @classmethod
    def of(cls, value: T, error: E | None = None) -> AsyncResult[T, E]:
        """Create an already-settled AsyncResult.

        A truthy ``error`` wins over ``value``.

        Args:
            value: The success value.
            error: Optional error payload.

        Returns:
            AsyncResult settled to Failure(error) if error is truthy, else Success(value).

        Example:
            ```python
            await AsyncResult.of(1).yield_()  # Success(1)
            await AsyncResult.of(1, ValueError('bad')).yield_()  # Failure(ValueError('bad'))
            ```
        """
        if error:
            return cls.from_result(Failure(error))
        return cls.from_result(Success(value))

    @classmethod
    def fail(cls, error: E) -> AsyncResult[T, E]:
        """Create an AsyncResult settled to Failure(error)."""
        return cls.from_result(Failure(error))

    @classmethod
    def from_result(cls, result: Result[T, E]) -> AsyncResult[T, E]:
        """Create an AsyncResult from a synchronous Result.

        Args:
            result: A Result[T, E] value.

        Returns:
            AsyncResult wrapping a coroutine that returns the result.
        """

        async def _result() -> Result[T, E]:
            return result

        return cls(_result())

    @classmethod
    def from_awaitable(cls, awaitable: Awaitable[T]) -> AsyncResult[T, Exception]:
        """Wrap an awaitable of a plain value.

        The produced value becomes Success; an exception raised while awaiting
        becomes Failure(exception).

        Args:
            awaitable: Any awaitable (coroutine, Task, Future).

        Returns:
            AsyncResult that never raises when observed.

        Example:
            ```python
            async def load() -> dict:
                ...

            result = await AsyncResult.from_awaitable(load()).yield_()
            ```
        """

        async def _caught() -> Result[T, Exception]:
            try:
                return Success(await awaitable)
            except Exception as exc:
                return Failure(exc)

        return AsyncResult(_caught())

    # ---- Observation ----

    async def yield_(self) -> Result[T, E]:
        """Return the underlying Result, awaiting the computation on first use.

        Cancelling the caller does not cancel the computation.

        Returns:
            The settled Result[T, E].

        Raises:
            BaseException: Whatever the wrapped awaitable itself raised.
        """
        if not self._done.is_set():
            self._start()
            await self._done
        if self._raised is not None:
            raise self._raised
        return self._settled

    def _start(self) -> None:
        """Start the computation in its own task unless it already runs."""
        if self._task is not None:
            return
        task = asyncio.get_running_loop().create_task(self._drive())
        self._task = task
        _running.add(task)
        task.add_done_callback(_running.discard)

    async def _drive(self) -> None:
        try:
            self._settled = await self._awaitable
        except Exception as exc:
            self._raised = exc
        except BaseException as exc:
            self._raised = exc
            raise
        finally:
            self._done.set()

    def __await__(self) -> Generator[Any, Any, Result[T, E]]:
        """Support ``await instance``; same as ``await instance.yield_()``."""
        return self.yield_().__await__()

    async def unwrap(self) -> T:
        """Return the success value or raise the stored error.

        Returns:
            The success value.

        Raises:
            BaseException: The stored error, when it is an exception.
            UnwrapError: When the stored error is not an exception.
        """
        match await self.yield_():
            case Success(value):
                return value
            case Failure(BaseException() as error):
                raise error
            case Failure(error):
                raise UnwrapError(error)

    # ---- Transformation & recovery ----

    def map[U](self, fn: Callable[[T], U | Awaitable[U]]) -> AsyncResult[U, E]:
        """Transform the success value.

        If ``fn`` returns an awaitable it is awaited. An exception raised by
        ``fn`` becomes Failure(exception). A Failure passes through with the
        same error object and ``fn`` is never called.

        Args:
            fn: Sync or async function applied to the success value.

        Returns:
            New AsyncResult with the transformed value.

        Example:
            ```python
            await AsyncResult.of(5).map(lambda x: x * 2).yield_()  # Success(10)
            ```
        """

        async def _mapped() -> Result[U, E]:
            result = await self.yield_()
            if not isinstance(result, Success):
                return result
            try:
                return Success(await _settle(fn(result.value)))
            except Exception as exc:
                return Failure(exc)  # type: ignore[arg-type]

        return AsyncResult(_mapped())

    def flat_map[U](self, fn: Callable[[T], Any]) -> AsyncResult[U, E]:
        """Chain a computation that may itself be deferred or fail.

        ``fn`` may return a plain value, an awaitable, a Result or an
        AsyncResult; the outcome is flattened into the returned instance.
        A Failure short-circuits exactly like ``map``.

        Args:
            fn: Function from the success value to the next step.

        Returns:
            New AsyncResult with the chained outcome.

        Example:
            ```python
            def lookup(id: int) -> AsyncResult[User, Exception]:
                ...

            await AsyncResult.of(1).flat_map(lookup).yield_()
            ```
        """

        async def _chained() -> Result[U, E]:
            result = await self.yield_()
            if not isinstance(result, Success):
                return result
            try:
                next_step = fn(result.value)
            except Exception as exc:
                return Failure(exc)  # type: ignore[arg-type]
            return await _adopt(next_step)

        return AsyncResult(_chained())

    def recover(self, fn: Callable[[E], T | Awaitable[T]]) -> AsyncResult[T, E]:
        """Replace a Failure with Success(fn(error)).

        Success passes through unchanged. An exception raised by ``fn``
        becomes the new Failure.

        Args:
            fn: Function from the error to a replacement success value.

        Returns:
            New AsyncResult.
        """

        async def _recovered() -> Result[T, E]:
            result = await self.yield_()
            if not isinstance(result, Failure):
                return result
            try:
                return Success(await _settle(fn(result.error)))
            except Exception as exc:
                return Failure(exc)  # type: ignore[arg-type]

        return AsyncResult(_recovered())

    def or_else(
        self,
        alternative: AsyncResult[T, E] | Callable[[E], AsyncResult[T, E]],
    ) -> AsyncResult[T, E]:
        """Replace a Failure with another AsyncResult's outcome.

        Args:
            alternative: A fixed AsyncResult, or a function building one from the error.

        Returns:
            New AsyncResult.
        """

        async def _alternative() -> Result[T, E]:
            result = await self.yield_()
            if not isinstance(result, Failure):
                return result
            if isinstance(alternative, AsyncResult):
                return await alternative.yield_()
            return await _delegate(alternative, result.error)

        return AsyncResult(_alternative())

    # ---- Conditional, filtering, observational ----

    def match(
        self,
        rules: MatchRule[T] | Sequence[MatchRule[T]],
        options: MatchOptions | None = None,
    ) -> AsyncResult[T, Any]:
        """Branch on the success value with ordered rules.

        In FIRST mode the first rule whose condition holds supplies the new
        value (its action's return is flattened like ``flat_map``). In EVERY
        mode each matching action runs in order for its effect and the
        original value is kept.

        If nothing matches the result is Failure(NoMatchError) unless
        ``continue_if_no_match`` is set. A condition or action that raises
        yields Failure(exception), or the original value when
        ``continue_on_error`` is set. A Failure passes through untouched.

        Args:
            rules: One rule or a sequence of rules.
            options: Matching options; defaults to ``MatchOptions()``.

        Returns:
            New AsyncResult.

        Example:
            ```python
            await AsyncResult.of(1).match([
                MatchRule(lambda v: v == 1, lambda v: v + 1),
                MatchRule(lambda v: v == 2, lambda v: v + 2),
            ]).yield_()  # Success(2)
            ```
        """
        opts = options if options is not None else MatchOptions()
        rule_list = [rules] if isinstance(rules, MatchRule) else list(rules)

        async def _matched() -> Result[T, Any]:
            result = await self.yield_()
            if not isinstance(result, Success):
                return result
            value = result.value
            matched = False
            for rule in rule_list:
                try:
                    if not await _settle(rule.condition(value)):
                        continue
                    matched = True
                    outcome = await _settle(rule.action(value))
                except Exception as exc:
                    if opts.continue_on_error:
                        return result
                    return Failure(exc)
                adopted = await _adopt(outcome)
                if opts.mode is MatchMode.FIRST:
                    return adopted
            if not matched and not opts.continue_if_no_match:
                return Failure(NoMatchError(value))
            return result

        return AsyncResult(_matched())

    def filter(
        self,
        predicate: Callable[[T], bool | Awaitable[bool]],
        error_fn: Callable[[T], Any] | None = None,
    ) -> AsyncResult[T, Any]:
        """Keep the success value only if ``predicate`` holds.

        A false or raising predicate produces Failure(error_fn(value)),
        defaulting to Failure(PredicateError(value)).

        Args:
            predicate: Sync or async predicate over the value.
            error_fn: Builds the error for a rejected value.

        Returns:
            New AsyncResult.
        """

        async def _filtered() -> Result[T, Any]:
            result = await self.yield_()
            if not isinstance(result, Success):
                return result
            try:
                keep = await _settle(predicate(result.value))
            except Exception:
                logger.debug('filter_predicate_raised', exc_info=True)
                keep = False
            if keep:
                return result
            if error_fn is None:
                return Failure(PredicateError(result.value))
            try:
                return Failure(error_fn(result.value))
            except Exception as exc:
                return Failure(exc)

        return AsyncResult(_filtered())

    def tap(self, fn: Callable[[T], Any]) -> AsyncResult[T, E]:
        """Run ``fn`` on the success value for its side effect.

        The original value is kept whatever ``fn`` returns. An exception
        raised by ``fn`` becomes Failure(exception).
        """

        async def _tapped() -> Result[T, E]:
            result = await self.yield_()
            if isinstance(result, Success):
                try:
                    await _settle(fn(result.value))
                except Exception as exc:
                    return Failure(exc)  # type: ignore[arg-type]
            return result

        return AsyncResult(_tapped())

    async def fold[U](
        self,
        on_success: Callable[[T], U | Awaitable[U]],
        on_failure: Callable[[E], U | Awaitable[U]],
    ) -> FoldOutcome:
        """Collapse to a plain FoldOutcome.

        Exactly one handler runs. If it (or the computation) raises, the
        exception is returned as ``FoldOutcome(error=...)``.

        Args:
            on_success: Applied to the success value.
            on_failure: Applied to the error.

        Returns:
            FoldOutcome with ``result`` or ``error`` set.

        Example:
            ```python
            outcome = await AsyncResult.of(1).fold(lambda v: v + 1, str)
            assert outcome == FoldOutcome(result=2)
            ```
        """
        try:
            match await self.yield_():
                case Success(value):
                    folded = await _settle(on_success(value))
                case Failure(error):
                    folded = await _settle(on_failure(error))
        except Exception as exc:
            return FoldOutcome(error=exc)
        return FoldOutcome(result=folded)

    def log(
        self,
        sink: Any = None,
        formatter: Callable[[Result[T, E]], Any] | None = None,
    ) -> AsyncResult[T, E]:
        """Write a description of the Result to a sink and pass it through.

        Args:
            sink: Object with a ``log(message)`` method. Falls back to the
                configured default sink when missing or unusable.
            formatter: Builds the message; defaults to "Success: <value>" /
                "Error: <error>".

        Returns:
            New AsyncResult with the same outcome.
        """
        describe = formatter if formatter is not None else _describe

        async def _logged() -> Result[T, E]:
            result = await self.yield_()
            try:
                resolve_sink(sink).log(describe(result))
            except Exception:
                logger.warning('log_sink_failed', sink=repr(sink), exc_info=True)
            return result

        return AsyncResult(_logged())

    def handle_specific_errors(
        self,
        error_kinds: type[BaseException] | Iterable[type[BaseException]],
        handler: Callable[[E], AsyncResult[T, E]],
    ) -> AsyncResult[T, E]:
        """Delegate Failures whose error is an instance of ``error_kinds`` to ``handler``.

        Args:
            error_kinds: One error type or several.
            handler: Builds the replacement AsyncResult from the error.

        Returns:
            New AsyncResult.
        """
        kinds = (error_kinds,) if isinstance(error_kinds, type) else tuple(error_kinds)

        async def _handled() -> Result[T, E]:
            result = await self.yield_()
            if isinstance(result, Failure) and isinstance(result.error, kinds):
                return await _delegate(handler, result.error)
            return result

        return AsyncResult(_handled())

    def handle_http_errors(
        self,
        status_codes: Iterable[int],
        handler: Callable[[HttpFailure | HttpError], AsyncResult[T, E]],
    ) -> AsyncResult[T, E]:
        """Delegate HTTP Failures with a listed status code to ``handler``.

        Both ``HttpFailure`` structs and ``HttpError`` exceptions are matched.
        """
        codes = frozenset(status_codes)

        async def _handled() -> Result[T, E]:
            result = await self.yield_()
            if (
                isinstance(result, Failure)
                and isinstance(result.error, (HttpFailure, HttpError))
                and result.error.status_code in codes
            ):
                return await _delegate(handler, result.error)
            return result

        return AsyncResult(_handled())

    # ---- Aggregation & resilience ----

    @staticmethod
    def zip(*computations: Any) -> AsyncResult[dict[str, Any], Any]:
        """Observe several computations concurrently; see ``resilience.zip_results``."""
        from fluent_result.async_.resilience import zip_results

        return zip_results(*computations)

    @staticmethod
    def retry(
        operation_factory: Callable[[], AsyncResult[T, E]],
        policy: RetryPolicy[E],
    ) -> AsyncResult[T, E]:
        """Retry a freshly built computation; see ``resilience.retry``."""
        from fluent_result.async_.resilience import retry

        return retry(operation_factory, policy)

    @staticmethod
    def timeout(
        operation: Callable[[CancellationSignal], AsyncResult[T, E]],
        duration: float,
        timeout_error: E,
    ) -> AsyncResult[T, E]:
        """Race a computation against a timer; see ``resilience.timeout``."""
        from fluent_result.async_.resilience import timeout

        return timeout(operation, duration, timeout_error)

    @staticmethod
    async def time_execution(
        operation: Callable[[], AsyncResult[T, E]],
        sink: Any = None,
        formatter: Callable[[float, Result[T, E]], Any] | None = None,
    ) -> Result[T, E]:
        """Measure how long a computation takes; see ``resilience.time_execution``."""
        from fluent_result.async_.resilience import time_execution

        return await time_execution(operation, sink, formatter)

    def __repr__(self) -> str:
        if self._settled is _PENDING:
            return f'AsyncResult({self._awaitable!r})'
        return f'AsyncResult(settled={self._settled!r})'

