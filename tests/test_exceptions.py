"""Tests for the injection exception hierarchy."""

import pytest

from qualinject.exceptions import (
    AmbiguousDependencyError,
    AsyncDependencyInSyncContextError,
    DependencyNotFoundError,
    InjectionError,
    InvalidParameterError,
)
from qualinject.injector import Injector
from qualinject.qualifier import qualifier


@pytest.mark.parametrize(
    "error_type",
    [
        AmbiguousDependencyError,
        AsyncDependencyInSyncContextError,
        DependencyNotFoundError,
        InvalidParameterError,
    ],
)
def test_all_errors_are_injection_errors(error_type: type[Exception]) -> None:
    assert issubclass(error_type, InjectionError)


def test_invalid_parameter_error_is_illegal_argument() -> None:
    assert issubclass(InvalidParameterError, ValueError)


class TestDependencyNotFoundError:
    def test_carries_qualifier(self, injector: Injector) -> None:
        missing = qualifier("missing")

        with pytest.raises(DependencyNotFoundError) as exc_info:
            injector.get(missing)

        assert exc_info.value.qualifier is missing
        assert "No dependency found" in str(exc_info.value)

    def test_raised_by_get_sync(self, injector: Injector) -> None:
        with pytest.raises(DependencyNotFoundError):
            injector.get_sync("missing")


class TestAmbiguousDependencyError:
    def test_names_combined_qualifier(self, injector: Injector) -> None:
        injector.inject_value(1, "dup")
        injector.inject_value(2, "dup")

        with pytest.raises(AmbiguousDependencyError) as exc_info:
            injector.get(qualifier("dup") & int)

        assert str(exc_info.value) == "More than one dependency found for qualifier: ('dup' & int)"

    def test_not_raised_by_get_all(self, injector: Injector) -> None:
        injector.inject_value(1, "dup")
        injector.inject_value(2, "dup")

        assert injector.get_all("dup") == [1, 2]


class TestAsyncDependencyInSyncContextError:
    def test_message_without_qualifier(self) -> None:
        error = AsyncDependencyInSyncContextError()

        assert str(error) == "Asynchronous dependencies found during synchronous resolving"
        assert error.qualifier is None

    def test_message_for_single_dependency(self) -> None:
        error = AsyncDependencyInSyncContextError(qualifier("test"))

        assert str(error) == (
            "Asynchronous dependency found during synchronous resolving for qualifier: 'test'"
        )

    def test_message_for_multiple_dependencies(self) -> None:
        error = AsyncDependencyInSyncContextError(qualifier("test"), multiple=True)

        assert str(error) == (
            "Asynchronous dependencies found during synchronous resolving for qualifier: 'test'"
        )
