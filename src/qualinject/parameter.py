from __future__ import annotations

import collections.abc
import inspect
from typing import TYPE_CHECKING, Annotated, Any, get_args, get_origin, get_type_hints

from qualinject.deferred import Deferred, gather, is_deferred
from qualinject.exceptions import InjectionError, InvalidParameterError
from qualinject.qualifier import Qualifier, create_qualifier

if TYPE_CHECKING:
    from qualinject.injector import Injector

_CONTAINER_ORIGINS = (list, tuple, collections.abc.Sequence)
_UNRESTRICTED_TYPES = (object, Any)
_NOT_INJECTED_KINDS = (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD)


def _is_container(annotation: Any) -> bool:
    return annotation in _CONTAINER_ORIGINS or get_origin(annotation) in _CONTAINER_ORIGINS


class Parameter:
    """One constructor or factory argument of an injectable.

    A parameter knows its declared type and optional qualifier and resolves
    itself through the injector it is bound to. List-like parameters
    (``list[T]``, ``Sequence[T]``, ``tuple[T, ...]``) receive every matching
    dependency and therefore require an explicit qualifier.

    Args:
        type_: The declared parameter type.
        qualifier: Optional qualifier narrowing the lookup.
        name: Keyword the resolved value is passed under. ``None`` passes it
            positionally.
        injector: Injector to resolve through. May be bound later.

    Raises:
        InvalidParameterError: If a list-like parameter has no qualifier.

    """

    __slots__ = ("type", "name", "is_container", "qualifier", "_injector")

    def __init__(
        self,
        type_: Any,
        qualifier: Any = None,
        *,
        name: str | None = None,
        injector: Injector | None = None,
    ) -> None:
        self.type = type_
        self.name = name
        self.is_container = _is_container(type_)
        self._injector = injector
        if self.is_container:
            if qualifier is None:
                raise InvalidParameterError(
                    f"List parameter {name or type_!r} must be qualified, "
                    f"for example Annotated[list[T], qualifier('name')]",
                )
            self.qualifier: Qualifier = create_qualifier(qualifier)
        elif qualifier is None:
            self.qualifier = create_qualifier(object if type_ is Any else type_)
        elif type_ in _UNRESTRICTED_TYPES:
            self.qualifier = create_qualifier(qualifier)
        else:
            self.qualifier = create_qualifier(qualifier).and_(type_)

    def bind(self, injector: Injector) -> Parameter:
        """Attach the injector this parameter resolves through."""
        self._injector = injector
        return self

    def resolve(self) -> Any:
        """Resolve the parameter value.

        Returns:
            The dependency, or a list of dependencies for list-like
            parameters. Either can be a ``Deferred`` when part of the graph
            is asynchronous.

        """
        if self._injector is None:
            raise InjectionError(f"Parameter {self!r} is not bound to an injector")
        if not self.is_container:
            return self._injector.get(self.qualifier)

        values = self._injector.get_all(self.qualifier)
        wrap = tuple if self._wants_tuple() else list
        if any(is_deferred(value) for value in values):
            return Deferred(_gather_as(values, wrap))
        return wrap(values)

    def _wants_tuple(self) -> bool:
        return self.type is tuple or get_origin(self.type) is tuple

    def __repr__(self) -> str:
        label = f"{self.name}: " if self.name else ""
        return f"Parameter({label}{_type_name(self.type)}, qualifier={self.qualifier})"


async def _gather_as(values: list[Any], wrap: type) -> Any:
    return wrap(await gather(values))


def _type_name(value: Any) -> str:
    return getattr(value, "__name__", repr(value))


def _split_annotated(annotation: Any) -> tuple[Any, Qualifier | None]:
    """Split ``Annotated[T, qualifier(...)]`` into ``(T, qualifier)``."""
    if get_origin(annotation) is not Annotated:
        return annotation, None
    base_type, *metadata = get_args(annotation)
    found = next((item for item in metadata if isinstance(item, Qualifier)), None)
    return base_type, found


def _signature_target(target: Any) -> Any:
    if inspect.isclass(target):
        return target.__init__
    return target


def parameters_from_signature(target: Any) -> list[Parameter]:
    """Derive the injected parameters of a class constructor or factory.

    Self, ``*args``, ``**kwargs`` and parameters that have a default value are
    not injected. Qualifiers are read from ``Annotated`` metadata.

    Args:
        target: A class (its ``__init__`` is inspected) or a callable.

    Returns:
        Parameters in declaration order, unbound.

    Raises:
        InvalidParameterError: If a required parameter has no annotation or
            its annotation cannot be evaluated.

    """
    try:
        sig = inspect.signature(target)
    except (ValueError, TypeError):
        return []

    try:
        hints = get_type_hints(_signature_target(target), include_extras=True)
    except NameError as e:
        raise InvalidParameterError(
            f"Cannot evaluate parameter annotations of {_type_name(target)}: {e}",
        ) from e
    except TypeError:
        hints = {
            name: param.annotation
            for name, param in sig.parameters.items()
            if param.annotation is not inspect.Parameter.empty
        }

    parameters: list[Parameter] = []
    for name, param in sig.parameters.items():
        if param.kind in _NOT_INJECTED_KINDS or param.default is not inspect.Parameter.empty:
            continue
        annotation = hints.get(name, inspect.Parameter.empty)
        if annotation is inspect.Parameter.empty:
            raise InvalidParameterError(
                f"Parameter {name!r} of {_type_name(target)} has no type annotation",
            )
        base_type, found = _split_annotated(annotation)
        keyword = None if param.kind is inspect.Parameter.POSITIONAL_ONLY else name
        parameters.append(Parameter(base_type, found, name=keyword))
    return parameters
