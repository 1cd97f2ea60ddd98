"""Tests for CancellationSignal."""

import anyio
import pytest
from fluent_result import CancellationSignal, Cancelled, CancelledError, Failure


class TestCancellationSignal:
    """Tests for the one-shot cancellation token."""

    def test_starts_clear(self) -> None:
        """A new signal is not cancelled and has no reason."""
        signal = CancellationSignal()
        assert not signal.cancelled
        assert signal.reason is None
        assert signal.check() is None

    def test_cancel_sets_reason(self) -> None:
        """cancel() records the reason and check() reports it."""
        signal = CancellationSignal()
        signal.cancel('deadline')
        assert signal.cancelled
        assert signal.reason == 'deadline'
        assert signal.check() == Failure(Cancelled('deadline'))

    def test_cancel_is_idempotent(self) -> None:
        """Only the first cancel() counts."""
        signal = CancellationSignal()
        signal.cancel('first')
        signal.cancel('second')
        assert signal.reason == 'first'

    def test_raise_if_cancelled(self) -> None:
        """raise_if_cancelled() raises CancelledError only after cancel()."""
        signal = CancellationSignal()
        signal.raise_if_cancelled()
        signal.cancel('stop')
        with pytest.raises(CancelledError, match='stop'):
            signal.raise_if_cancelled()

    async def test_wait_returns_after_cancel(self) -> None:
        """wait() wakes up once another task cancels the signal."""
        signal = CancellationSignal()

        async def fire() -> None:
            await anyio.sleep(0.01)
            signal.cancel()

        with anyio.fail_after(1):
            async with anyio.create_task_group() as tg:
                tg.start_soon(fire)
                await signal.wait()
        assert signal.cancelled

    def test_repr(self) -> None:
        """repr shows the cancelled flag."""
        assert repr(CancellationSignal()) == 'CancellationSignal(cancelled=False)'
