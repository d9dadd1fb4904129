from __future__ import annotations

import collections.abc
import inspect
import logging
from collections.abc import Callable, Iterator, Sequence
from typing import Any, TypeVar, get_args, get_origin, get_type_hints, overload

from typing_extensions import Self

from qualinject.deferred import as_deferred, gather, is_deferred, settle
from qualinject.exceptions import (
    AmbiguousDependencyError,
    AsyncDependencyInSyncContextError,
    DependencyNotFoundError,
    InvalidParameterError,
)
from qualinject.injectable import Injectable, InstanceState
from qualinject.parameter import Parameter
from qualinject.qualifier import QualifierLike, create_qualifier
from qualinject.types import Factory

logger = logging.getLogger(__name__)

T = TypeVar("T")
C = TypeVar("C", bound=Callable[..., Any])

_AWAITABLE_ORIGINS = (collections.abc.Awaitable, collections.abc.Coroutine)


class Injector:
    """Registry of injectables and entry point for dependency lookups.

    Injectables are kept in registration order, which is also the order
    ``get_all`` returns matches in. Registering the same type twice keeps both
    registrations; single-valued lookups then need a name to disambiguate.

    Every lookup accepts a ``Qualifier``, a type or a name. Plain ``get``
    returns the dependency synchronously when its whole graph is synchronous
    and a ``Deferred`` otherwise. ``get_sync`` insists on the synchronous
    result and ``get_async`` always returns an awaitable.

    Examples:
        .. code-block:: python

            injector = Injector()
            injector.inject_value("postgresql://localhost/app", "dsn")


            @injector.injectable
            class Database:
                def __init__(self, dsn: Annotated[str, qualifier("dsn")]) -> None:
                    self.dsn = dsn


            database = injector.get_sync(Database)

    """

    def __init__(self) -> None:
        self._injectables: list[Injectable[Any]] = []

    def register(self, injectable: Injectable[Any]) -> Self:
        """Append *injectable* to the registry and bind its parameters to this injector."""
        self._injectables.append(injectable.bind(self))
        logger.debug("Registered %r", injectable)
        return self

    def inject_class(
        self,
        type_: type[Any],
        *names: str,
        parameters: Sequence[Parameter] | None = None,
    ) -> Self:
        """Register *type_*, constructed with its annotated ``__init__`` arguments.

        Args:
            type_: The class to register.
            *names: Optional qualifier names.
            parameters: Explicit constructor parameters replacing signature
                inspection.

        Raises:
            InvalidParameterError: If a constructor parameter is invalid.

        """
        return self.register(Injectable.from_class(type_, names, parameters))

    def inject_factory(
        self,
        type_: type[Any],
        factory: Factory,
        *names: str,
        parameters: Sequence[Parameter] | None = None,
    ) -> Self:
        """Register *type_* as created by *factory*.

        The factory may be synchronous or return an awaitable (for example a
        coroutine function).

        Args:
            type_: The type the factory produces.
            factory: The factory callable.
            *names: Optional qualifier names.
            parameters: Explicit factory parameters replacing signature
                inspection.

        Raises:
            InvalidParameterError: If a factory parameter is invalid.

        """
        return self.register(Injectable.from_factory(type_, factory, names, parameters))

    def inject_value(self, value: Any, *names: str) -> Self:
        """Register an existing *value*, typed by ``type(value)``.

        An awaitable value is resolved asynchronously, like an async factory.
        """
        return self.register(Injectable.from_value(value, names))

    @overload
    def injectable(self, target: C) -> C: ...

    @overload
    def injectable(self, target: str, *names: str) -> Callable[[C], C]: ...

    @overload
    def injectable(self) -> Callable[[C], C]: ...

    def injectable(self, target: Any = None, *names: str) -> Any:
        """Register a class or factory function with this injector.

        Can be used bare (``@injector.injectable``) or with qualifier names
        (``@injector.injectable("primary", "db")``). A class is registered
        with ``inject_class``. A function is registered with
        ``inject_factory`` under its return annotation.

        Raises:
            InvalidParameterError: If a decorated function has no return
                annotation.

        """
        if isinstance(target, str):
            names = (target, *names)
            target = None

        def decorator(inner: C) -> C:
            if inspect.isclass(inner):
                self.inject_class(inner, *names)
            else:
                self.inject_factory(_produced_type(inner), inner, *names)
            return inner

        if target is not None:
            return decorator(target)
        return decorator

    def clear(self) -> None:
        """Drop every registration together with its memoized instance."""
        self._injectables.clear()

    def get_all(self, qualifier: QualifierLike) -> list[Any]:
        """Return all dependencies matching *qualifier* in registration order.

        Injectables whose factory is currently running are skipped, so a
        dependency cycle yields fewer matches instead of an error.

        Returns:
            The matching dependencies. Elements are ``Deferred`` where the
            dependency is created asynchronously.

        """
        match = create_qualifier(qualifier)
        instances = [
            injectable.get_instance()
            for injectable in list(self._injectables)
            if match.matches(injectable)
        ]
        return [instance for instance in instances if instance is not InstanceState.IN_PROGRESS]

    def get(self, qualifier: QualifierLike) -> Any:
        """Return the single dependency matching *qualifier*.

        Returns:
            The dependency, or a ``Deferred`` when it is created
            asynchronously.

        Raises:
            DependencyNotFoundError: If nothing matches.
            AmbiguousDependencyError: If more than one injectable matches.

        """
        matches = self.get_all(qualifier)
        if len(matches) == 1:
            return matches[0]
        if matches:
            raise AmbiguousDependencyError(create_qualifier(qualifier))
        raise DependencyNotFoundError(create_qualifier(qualifier))

    def get_sync(self, qualifier: QualifierLike) -> Any:
        """Return the single dependency matching *qualifier* synchronously.

        Raises:
            DependencyNotFoundError: If nothing matches.
            AmbiguousDependencyError: If more than one injectable matches.
            AsyncDependencyInSyncContextError: If the dependency can only be
                created asynchronously.

        """
        dependency = self.get(qualifier)
        if is_deferred(dependency):
            raise AsyncDependencyInSyncContextError(create_qualifier(qualifier))
        return dependency

    def get_all_sync(self, qualifier: QualifierLike) -> list[Any]:
        """Return all dependencies matching *qualifier* synchronously.

        Raises:
            AsyncDependencyInSyncContextError: If any match can only be
                created asynchronously.

        """
        dependencies = self.get_all(qualifier)
        if any(is_deferred(dependency) for dependency in dependencies):
            raise AsyncDependencyInSyncContextError(create_qualifier(qualifier), multiple=True)
        return dependencies

    async def get_async(self, qualifier: QualifierLike) -> Any:
        """Await the single dependency matching *qualifier*, synchronous or not."""
        return await settle(self.get(qualifier))

    async def get_all_async(self, qualifier: QualifierLike) -> list[Any]:
        """Await all dependencies matching *qualifier* concurrently."""
        return await gather(self.get_all(qualifier))

    def create(self, type_: type[T], factory: Factory | None = None) -> Any:
        """Create a new, unregistered and unmemoized instance of *type_*.

        Parameters of the class constructor (or of *factory*) are resolved
        through this injector as usual, so registered dependencies are shared.

        Returns:
            The instance, or a ``Deferred`` when part of the graph is
            asynchronous.

        """
        if factory is None:
            injectable = Injectable.from_class(type_)
        else:
            injectable = Injectable.from_factory(type_, factory)
        return injectable.bind(self).create_instance()

    def create_sync(self, type_: type[T], factory: Factory | None = None) -> T:
        """Create a new instance of *type_* synchronously.

        Raises:
            AsyncDependencyInSyncContextError: If the instance can only be
                created asynchronously.

        """
        instance = self.create(type_, factory)
        if is_deferred(instance):
            as_deferred(instance).discard()
            raise AsyncDependencyInSyncContextError()
        return instance

    async def create_async(self, type_: type[T], factory: Factory | None = None) -> T:
        """Create and await a new instance of *type_*."""
        return await settle(self.create(type_, factory))

    def __len__(self) -> int:
        return len(self._injectables)

    def __iter__(self) -> Iterator[Injectable[Any]]:
        return iter(list(self._injectables))

    def __repr__(self) -> str:
        return f"Injector({len(self._injectables)} injectable(s))"


def _produced_type(factory: Callable[..., Any]) -> Any:
    """Return the type a factory function produces, read from its return annotation."""
    name = getattr(factory, "__name__", repr(factory))
    try:
        return_type = get_type_hints(factory).get("return")
    except NameError as e:
        raise InvalidParameterError(
            f"Cannot evaluate the return annotation of factory {name!r}: {e}",
        ) from e
    if return_type is None:
        raise InvalidParameterError(
            f"@injectable on function {name!r} requires a return type annotation",
        )
    if get_origin(return_type) in _AWAITABLE_ORIGINS:
        return_type = get_args(return_type)[-1]
    return return_type
