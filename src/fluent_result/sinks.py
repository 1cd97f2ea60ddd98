"""Log sinks consumed by ``AsyncResult.log`` and ``AsyncResult.time_execution``."""

from __future__ import annotations

import sys
from typing import Any, TextIO

from fluent_result._logging import get_logger

__all__ = [
    'StdoutSink',
    'StructlogSink',
    'has_log_method',
    'resolve_sink',
]


class StdoutSink:
    """Writes each message on its own line to a text stream (stdout by default)."""

    __slots__ = ('_stream',)

    def __init__(self, stream: TextIO | None = None) -> None:
        self._stream = stream

    def log(self, message: Any, /) -> None:
        stream = self._stream if self._stream is not None else sys.stdout
        print(message, file=stream)

    def __repr__(self) -> str:
        return 'StdoutSink()' if self._stream is None else f'StdoutSink({self._stream!r})'


class StructlogSink:
    """Forwards messages to a structlog logger as the event text."""

    __slots__ = ('_level', '_logger')

    def __init__(self, name: str = 'fluent_result', level: str = 'info') -> None:
        self._logger = get_logger(name)
        self._level = level.lower()

    def log(self, message: Any, /) -> None:
        getattr(self._logger, self._level)(str(message))

    def __repr__(self) -> str:
        return f'StructlogSink(level={self._level!r})'


def has_log_method(candidate: object) -> bool:
    """Whether ``candidate`` exposes a callable ``log`` attribute."""
    return candidate is not None and callable(getattr(candidate, 'log', None))


def resolve_sink(sink: object | None) -> Any:
    """Pick the sink to write to: ``sink`` if usable, else the configured default."""
    if has_log_method(sink):
        return sink
    from fluent_result._config import get_config

    return get_config().default_sink
