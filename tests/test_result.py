"""Tests for the Result type: Success, Failure and the narrowing guards."""

import dataclasses

import pytest
from fluent_result import Failure, Result, Success, is_failure, is_success
from hypothesis import given

from tests.strategies import exceptions, values


class TestSuccess:
    """Tests for the Success variant."""

    def test_holds_value(self) -> None:
        """Success exposes its value."""
        assert Success(42).value == 42

    def test_discriminator(self) -> None:
        """is_success/is_failure report the variant."""
        assert Success(1).is_success() is True
        assert Success(1).is_failure() is False

    def test_has_no_error_field(self) -> None:
        """Success carries no error attribute."""
        with pytest.raises(AttributeError):
            Success(1).error  # type: ignore[attr-defined]  # noqa: B018

    def test_is_frozen(self) -> None:
        """Success is immutable."""
        with pytest.raises(dataclasses.FrozenInstanceError):
            Success(1).value = 2  # type: ignore[misc]

    def test_repr(self) -> None:
        """repr shows the wrapped value."""
        assert repr(Success('x')) == "Success('x')"

    @given(values)
    def test_equality_by_value(self, value) -> None:
        """Successes with equal values are equal."""
        assert Success(value) == Success(value)


class TestFailure:
    """Tests for the Failure variant."""

    def test_holds_error(self) -> None:
        """Failure keeps the very error object."""
        error = ValueError('bad')
        assert Failure(error).error is error

    def test_discriminator(self) -> None:
        """is_success/is_failure report the variant."""
        assert Failure('e').is_success() is False
        assert Failure('e').is_failure() is True

    def test_has_no_value_field(self) -> None:
        """Failure carries no value attribute."""
        with pytest.raises(AttributeError):
            Failure('e').value  # type: ignore[attr-defined]  # noqa: B018

    def test_repr(self) -> None:
        """repr shows the wrapped error."""
        assert repr(Failure('boom')) == "Failure('boom')"

    @given(exceptions)
    def test_success_and_failure_never_equal(self, error) -> None:
        """The two variants never compare equal."""
        assert Failure(error) != Success(error)


class TestPatternMatching:
    """Results are taken apart with structural pattern matching."""

    @staticmethod
    def describe(result: Result[int, str]) -> str:
        match result:
            case Success(value):
                return f'ok:{value}'
            case Failure(error):
                return f'err:{error}'

    def test_match_success(self) -> None:
        """case Success(value) binds the value."""
        assert self.describe(Success(3)) == 'ok:3'

    def test_match_failure(self) -> None:
        """case Failure(error) binds the error."""
        assert self.describe(Failure('nope')) == 'err:nope'


class TestGuards:
    """Tests for is_success / is_failure."""

    def test_is_success(self) -> None:
        """is_success narrows to Success."""
        assert is_success(Success(1))
        assert not is_success(Failure('e'))

    def test_is_failure(self) -> None:
        """is_failure narrows to Failure."""
        assert is_failure(Failure('e'))
        assert not is_failure(Success(1))
