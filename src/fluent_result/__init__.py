"""fluent-result: composable async Result wrapper for Python 3.12+.

Flat imports (preferred):
    from fluent_result import AsyncResult, Success, Failure, RetryPolicy
    from fluent_result import MatchRule, MatchOptions, MatchMode, NamedComputation

Submodule imports (for organization):
    from fluent_result.result import Success, Failure, Result
    from fluent_result.async_ import AsyncResult, CancellationSignal
    from fluent_result.errors import HttpFailure, HttpError
"""

# Async
from fluent_result.async_ import (
    AsyncResult,
    CancellationSignal,
    retry,
    time_execution,
    timeout,
    zip_results,
)

# Configuration
from fluent_result._config import Config, get_config, init
from fluent_result._logging import configure_logging, get_logger

# Decorators
from fluent_result.decorators import deferred

# Errors
from fluent_result.errors import (
    Cancelled,
    CancelledError,
    HttpError,
    HttpFailure,
    NoMatchError,
    PredicateError,
    UnwrapError,
    is_abort,
)

# Result types
from fluent_result.result import Failure, Result, Success, is_failure, is_success

# Sinks
from fluent_result.sinks import StdoutSink, StructlogSink

# Supporting types
from fluent_result.types import (
    FoldOutcome,
    LogSink,
    MatchMode,
    MatchOptions,
    MatchRule,
    NamedComputation,
    RetryPolicy,
)

__all__ = [
    # Async
    'AsyncResult',
    'CancellationSignal',
    # Errors
    'Cancelled',
    'CancelledError',
    # Configuration
    'Config',
    # Result types
    'Failure',
    # Supporting types
    'FoldOutcome',
    'HttpError',
    'HttpFailure',
    'LogSink',
    'MatchMode',
    'MatchOptions',
    'MatchRule',
    'NamedComputation',
    'NoMatchError',
    'PredicateError',
    'Result',
    'RetryPolicy',
    # Sinks
    'StdoutSink',
    'StructlogSink',
    'Success',
    'UnwrapError',
    'configure_logging',
    # Decorators
    'deferred',
    'get_config',
    'get_logger',
    'init',
    'is_abort',
    'is_failure',
    'is_success',
    'retry',
    'time_execution',
    'timeout',
    'zip_results',
]
