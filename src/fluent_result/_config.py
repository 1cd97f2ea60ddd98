"""Process-wide configuration: default log sink and logging level.

Set once at startup with ``init()``; every ``log``/``time_execution`` call
can still pass its own sink.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import Any

from fluent_result._logging import configure_logging
from fluent_result.sinks import StdoutSink, StructlogSink, has_log_method

__all__ = [
    'SINK_ENV_VAR',
    'Config',
    'get_config',
    'init',
    'reset',
]

SINK_ENV_VAR = 'FLUENT_RESULT_SINK'


@dataclass(frozen=True)
class Config:
    """Configuration for fluent-result.

    Attributes:
        default_sink: Sink used when a call does not pass a usable one.
        log_level: Logging level for structlog. None leaves logging untouched.
    """

    default_sink: Any = field(default_factory=StdoutSink)
    log_level: str | None = None


# Global configuration (set by init(), built lazily otherwise)
_config: Config | None = None


def _sink_from_name(name: str) -> Any:
    name = name.strip().lower()
    if name == 'structlog':
        return StructlogSink()
    if name not in ('', 'stdout'):
        logging.warning("Unknown %s value '%s', defaulting to stdout", SINK_ENV_VAR, name)
    return StdoutSink()


def _detect_sink() -> Any:
    """Sink named by FLUENT_RESULT_SINK ("stdout" or "structlog"), stdout otherwise."""
    return _sink_from_name(os.environ.get(SINK_ENV_VAR, ''))


def init(
    default_sink: Any = None,
    log_level: str | None = None,
    *,
    json_output: bool = False,
) -> Config:
    """Initialise fluent-result's process-wide configuration.

    Args:
        default_sink: A sink object with a ``log`` method, or "stdout" /
            "structlog". Detected from the environment if None.
        log_level: Logging level ("DEBUG", "INFO", etc.). None = leave
            logging configuration alone.
        json_output: Render structlog output as JSON when configuring logging.

    Returns:
        The Config that was set.

    Raises:
        TypeError: If ``default_sink`` has no callable ``log``.

    Example:
        ```python
        import fluent_result

        fluent_result.init(default_sink='structlog', log_level='INFO')
        ```
    """
    global _config  # noqa: PLW0603

    if default_sink is None:
        sink = _detect_sink()
    elif isinstance(default_sink, str):
        sink = _sink_from_name(default_sink)
    elif has_log_method(default_sink):
        sink = default_sink
    else:
        msg = f'default_sink must expose a log(message) method, got {default_sink!r}'
        raise TypeError(msg)

    _config = Config(default_sink=sink, log_level=log_level)

    if log_level is not None:
        configure_logging(log_level, json_output=json_output)

    return _config


def get_config() -> Config:
    """Get the current configuration, building the default on first use."""
    global _config  # noqa: PLW0603

    if _config is None:
        _config = Config(default_sink=_detect_sink())
    return _config


def reset() -> None:
    """Forget the current configuration; the next ``get_config()`` rebuilds it."""
    global _config  # noqa: PLW0603

    _config = None
