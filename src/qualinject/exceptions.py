from __future__ import annotations

from typing import Any


class InjectionError(Exception):
    """Represent a base class for all qualinject failures.

    Catch this type when you want to handle any injection error path without
    matching each concrete exception class individually.
    """


class DependencyNotFoundError(InjectionError):
    """Signal that no registered injectable matches a qualifier.

    Raised by ``Injector.get``/``get_sync``/``get_async`` and by parameter
    resolution inside ``create``/``create_sync``/``create_async``.

    Typical fixes include registering the dependency, checking the qualifier
    name for typos, or widening a combined qualifier.
    """

    def __init__(self, qualifier: Any) -> None:
        self.qualifier = qualifier
        super().__init__(f"No dependency found for qualifier: {qualifier}")


class AmbiguousDependencyError(InjectionError):
    """Signal that more than one registered injectable matches a qualifier.

    ``Injector.get_all`` never raises this error; it returns every match in
    registration order instead.

    Typical fixes include narrowing the lookup with a name qualifier or
    combining qualifiers with ``&`` / ``and_not``.
    """

    def __init__(self, qualifier: Any) -> None:
        self.qualifier = qualifier
        super().__init__(f"More than one dependency found for qualifier: {qualifier}")


class AsyncDependencyInSyncContextError(InjectionError):
    """Signal synchronous resolution of an asynchronous dependency graph.

    Raised by ``Injector.get_sync``, ``Injector.get_all_sync`` and
    ``Injector.create_sync`` when the selected graph produced a deferred value.

    Typical fix is switching to ``await injector.get_async(...)``.
    """

    def __init__(self, qualifier: Any = None, *, multiple: bool = False) -> None:
        self.qualifier = qualifier
        message = (
            "Asynchronous dependencies found during synchronous resolving"
            if multiple or qualifier is None
            else "Asynchronous dependency found during synchronous resolving"
        )
        if qualifier is not None:
            message = f"{message} for qualifier: {qualifier}"
        super().__init__(message)


class InvalidParameterError(InjectionError, ValueError):
    """Signal an invalid constructor or factory parameter declaration.

    Raised while an injectable is built, before any resolution happens, for
    example when a list parameter carries no qualifier or a required parameter
    has no type annotation.
    """
