"""Pytest configuration and shared fixtures for fluent-result tests."""

from __future__ import annotations

import logging
from typing import Any

import pytest


class ListSink:
    """Sink that records every message it receives."""

    def __init__(self) -> None:
        self.messages: list[Any] = []

    def log(self, message: Any) -> None:
        self.messages.append(message)


@pytest.fixture
def sink() -> ListSink:
    """A fresh recording sink."""
    return ListSink()


@pytest.fixture(autouse=True)
def reset_config() -> None:
    """Start and finish every test with the lazily built default configuration."""
    from fluent_result._config import reset

    reset()
    yield
    reset()


@pytest.fixture
def restore_root_logging() -> None:
    """Put the root logger's handlers and level back after configure_logging()."""
    import structlog

    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
    structlog.reset_defaults()
