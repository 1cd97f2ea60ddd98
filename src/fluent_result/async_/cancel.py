"""Cooperative cancellation signal handed to operations under ``AsyncResult.timeout``."""

from __future__ import annotations

import aiologic

from fluent_result.errors import Cancelled, CancelledError
from fluent_result.result import Failure

__all__ = ['CancellationSignal']


class CancellationSignal:
    """One-shot cancellation token.

    An operation that wants to cooperate with ``timeout`` checks the signal
    (or waits on it) and settles with ``Failure(Cancelled(...))`` once it
    fires. Backed by ``aiologic.Event``, so ``cancel()`` is safe to call from
    another thread.

    Example:
        ```python
        def fetch(signal: CancellationSignal) -> AsyncResult[bytes, Exception]:
            async def run() -> Result[bytes, Exception]:
                for chunk in chunks:
                    if (aborted := signal.check()) is not None:
                        return aborted
                    await download(chunk)
                return Success(data)

            return AsyncResult(run())

        await AsyncResult.timeout(fetch, 5.0, TimeoutError('fetch'))
        ```
    """

    __slots__ = ('_event', '_reason')

    def __init__(self) -> None:
        self._event = aiologic.Event()
        self._reason: str | None = None

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    @property
    def reason(self) -> str | None:
        return self._reason

    def cancel(self, reason: str | None = None) -> None:
        """Fire the signal. Later calls are no-ops."""
        if self._event.is_set():
            return
        self._reason = reason
        self._event.set()

    async def wait(self) -> None:
        """Suspend until the signal fires."""
        await self._event

    def check(self) -> Failure[Cancelled] | None:
        """Return ``Failure(Cancelled(reason))`` once cancelled, else None."""
        if self._event.is_set():
            return Failure(Cancelled(self._reason))
        return None

    def raise_if_cancelled(self) -> None:
        """Raise ``CancelledError`` once cancelled."""
        if self._event.is_set():
            raise CancelledError(self._reason)

    def __repr__(self) -> str:
        return f'CancellationSignal(cancelled={self.cancelled})'
