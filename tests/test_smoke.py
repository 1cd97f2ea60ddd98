"""Smoke tests to verify package structure and imports work."""


def test_import_result_types():
    """Test that result types can be imported."""
    from fluent_result import Failure, Result, Success, is_failure, is_success

    assert Success is not None
    assert Failure is not None
    assert Result is not None
    assert is_success is not None
    assert is_failure is not None


def test_import_async():
    """Test that async utilities can be imported."""
    from fluent_result import AsyncResult, CancellationSignal, retry, time_execution, timeout, zip_results

    assert AsyncResult.zip is not None
    assert CancellationSignal is not None
    assert retry is not None
    assert time_execution is not None
    assert timeout is not None
    assert zip_results is not None


def test_import_supporting_types():
    """Test that option and policy types can be imported."""
    from fluent_result import FoldOutcome, MatchMode, MatchOptions, MatchRule, NamedComputation, RetryPolicy

    assert MatchMode.FIRST.value == 'first'
    assert MatchMode.EVERY.value == 'every'
    assert MatchOptions().mode is MatchMode.FIRST
    assert RetryPolicy().times == 1
    assert MatchRule is not None
    assert NamedComputation is not None
    assert FoldOutcome is not None


def test_all_exports_resolve():
    """Test that every name in __all__ is importable."""
    import fluent_result

    for name in fluent_result.__all__:
        assert hasattr(fluent_result, name), name
