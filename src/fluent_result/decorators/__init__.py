"""Decorators for producing AsyncResult values."""

from fluent_result.decorators.deferred import deferred

__all__ = ['deferred']
