from collections.abc import Awaitable, Callable
from typing import Any, TypeAlias, TypeVar, Union

T = TypeVar("T")

FactoryResult: TypeAlias = Union[T, Awaitable[T]]
"""A factory produces its value directly or as an awaitable."""

Factory: TypeAlias = Callable[..., FactoryResult[Any]]
"""A class, function or other callable that creates a dependency."""
