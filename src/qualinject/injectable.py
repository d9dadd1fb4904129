from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from enum import Enum
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from qualinject.deferred import Deferred, as_deferred, gather, is_deferred
from qualinject.parameter import Parameter, parameters_from_signature
from qualinject.types import Factory

if TYPE_CHECKING:
    from qualinject.injector import Injector

logger = logging.getLogger(__name__)

T = TypeVar("T")


class InstanceState(Enum):
    """Placeholder states of an injectable's memoized instance slot."""

    UNRESOLVED = "unresolved"
    """The instance was never requested."""

    IN_PROGRESS = "in_progress"
    """The factory is running; nested lookups treat the injectable as unavailable."""


class Injectable(Generic[T]):
    """A registered, producible dependency.

    Holds the factory that creates the dependency, the parameters resolved and
    passed to that factory, optional qualifier names and the memoized
    instance. Every injectable is a process-wide singleton: ``get_instance``
    calls the factory at most once.

    Args:
        type_: The type the dependency is resolved as. Lookups by this type or
            any of its base classes match.
        factory: Callable creating the dependency, synchronously or by
            returning an awaitable.
        parameters: Parameters resolved and passed to the factory.
        names: Optional qualifier names the injectable also matches.

    """

    def __init__(
        self,
        type_: type[T],
        factory: Factory,
        parameters: Sequence[Parameter] = (),
        names: Iterable[str] = (),
    ) -> None:
        self.type = type_
        self.factory = factory
        self.parameters = list(parameters)
        self.names = tuple(names)
        self._instance: Any = InstanceState.UNRESOLVED

    @classmethod
    def from_class(
        cls,
        type_: type[T],
        names: Iterable[str] = (),
        parameters: Sequence[Parameter] | None = None,
    ) -> Injectable[T]:
        """Build an injectable constructing *type_* with its annotated ``__init__`` arguments."""
        if parameters is None:
            parameters = parameters_from_signature(type_)
        return cls(type_, type_, parameters, names)

    @classmethod
    def from_factory(
        cls,
        type_: type[T],
        factory: Factory,
        names: Iterable[str] = (),
        parameters: Sequence[Parameter] | None = None,
    ) -> Injectable[T]:
        """Build an injectable producing *type_* by calling *factory*."""
        if parameters is None:
            parameters = parameters_from_signature(factory)
        return cls(type_, factory, parameters, names)

    @classmethod
    def from_value(cls, value: T, names: Iterable[str] = ()) -> Injectable[T]:
        """Build an injectable always providing *value*, typed by ``type(value)``."""
        return cls(type(value), lambda: value, (), names)

    def bind(self, injector: Injector) -> Injectable[T]:
        """Bind all parameters to *injector*."""
        for parameter in self.parameters:
            parameter.bind(injector)
        return self

    @property
    def instance_state(self) -> Any:
        """The current slot content: an ``InstanceState``, a value or a ``Deferred``."""
        return self._instance

    def qualifies_as(self, qualifier: Any) -> bool:
        """Check whether this injectable matches a name or a type.

        Names match by membership. Types match when they appear in the MRO of
        the injectable's type, so a dependency registered as a subclass
        satisfies lookups for its base classes.
        """
        if isinstance(qualifier, str):
            return qualifier in self.names
        mro = getattr(self.type, "__mro__", (self.type,))
        return any(base is qualifier for base in mro)

    def create_instance(self) -> T | Deferred[T]:
        """Create a new dependency instance without memoizing it.

        All parameters are resolved before any of them is awaited. When none
        of them is deferred the factory is called synchronously; otherwise the
        deferred arguments are awaited together and the returned ``Deferred``
        settles to the factory result.
        """
        values = [parameter.resolve() for parameter in self.parameters]
        if any(is_deferred(value) for value in values):
            return Deferred(self._create_when_ready(values))
        instance = self._call_factory(values)
        if is_deferred(instance):
            return as_deferred(instance)
        return instance

    async def _create_when_ready(self, values: list[Any]) -> T:
        instance = self._call_factory(await gather(values))
        if is_deferred(instance):
            return await instance
        return instance

    def _call_factory(self, values: list[Any]) -> Any:
        args = []
        kwargs = {}
        for parameter, value in zip(self.parameters, values):
            if parameter.name is None:
                args.append(value)
            else:
                kwargs[parameter.name] = value
        logger.debug("Creating %s with %d argument(s)", _type_name(self.type), len(values))
        return self.factory(*args, **kwargs)

    def get_instance(self) -> T | Deferred[T] | InstanceState:
        """Return the memoized dependency instance, creating it on first use.

        Returns:
            The instance or a ``Deferred`` settling to it.
            ``InstanceState.IN_PROGRESS`` is returned while the factory of this
            injectable is still running, which is what a cyclic dependency
            observes.

        A ``Deferred`` cancelled by the shutdown of its event loop is dropped
        and the instance is created again.

        """
        if isinstance(self._instance, Deferred) and self._instance.cancelled():
            logger.debug("Recreating %s after cancelled creation", _type_name(self.type))
            self._instance = InstanceState.UNRESOLVED
        if self._instance is InstanceState.UNRESOLVED:
            self._instance = InstanceState.IN_PROGRESS
            self._instance = self.create_instance()
            if isinstance(self._instance, Deferred):
                self._instance.add_done_callback(self._settle)
        return self._instance

    def _settle(self, instance: T) -> None:
        self._instance = instance

    def __repr__(self) -> str:
        names = f", names={list(self.names)!r}" if self.names else ""
        return f"Injectable({_type_name(self.type)}{names})"


def _type_name(value: Any) -> str:
    return getattr(value, "__name__", repr(value))
