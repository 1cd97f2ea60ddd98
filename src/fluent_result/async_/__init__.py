"""Async utilities: AsyncResult, its resilience combinators and CancellationSignal.

This module provides:
- AsyncResult: Wrapper for composing deferred Result computations
- zip_results / retry / timeout / time_execution: Static combinators
- CancellationSignal: Cooperative abort token used by timeout

Examples:
    >>> from fluent_result.async_ import AsyncResult
    >>>
    >>> async def main():
    ...     result = await AsyncResult.of(21).map(lambda x: x * 2).yield_()
"""

from fluent_result.async_.cancel import CancellationSignal
from fluent_result.async_.resilience import retry, time_execution, timeout, zip_results
from fluent_result.async_.result import AsyncResult

__all__ = [
    'AsyncResult',
    'CancellationSignal',
    'retry',
    'time_execution',
    'timeout',
    'zip_results',
]
