from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Any, TypeAlias, Union

if TYPE_CHECKING:
    from qualinject.injectable import Injectable


QualifierLike: TypeAlias = Union["Qualifier", type, str]
"""A qualifier, a type or a name. Types and names are converted on demand."""


class Qualifier:
    """Select injectables by type, by name or by a combination of both.

    Qualifiers are immutable predicates. Combinators never modify their
    operands; they return a new qualifier whose name spells out the
    composition, which is what error messages show.

    Examples:
        .. code-block:: python

            numbers = qualifier("number")
            injector.get_all(numbers.and_not("two"))
            injector.get_all(numbers & (qualifier("two") | "three"))

            class Service:
                def __init__(self, primary: Annotated[Database, qualifier("primary")]) -> None:
                    ...

    """

    __slots__ = ("_check", "_name")

    def __init__(self, check: Callable[[Injectable[Any]], bool], name: str) -> None:
        self._check = check
        self._name = name

    def matches(self, injectable: Injectable[Any]) -> bool:
        """Return whether *injectable* satisfies this qualifier."""
        return self._check(injectable)

    def and_(self, other: QualifierLike) -> Qualifier:
        other_qualifier = create_qualifier(other)
        return Qualifier(
            lambda injectable: self.matches(injectable) and other_qualifier.matches(injectable),
            f"({self} & {other_qualifier})",
        )

    def or_(self, other: QualifierLike) -> Qualifier:
        other_qualifier = create_qualifier(other)
        return Qualifier(
            lambda injectable: self.matches(injectable) or other_qualifier.matches(injectable),
            f"({self} | {other_qualifier})",
        )

    def and_not(self, other: QualifierLike) -> Qualifier:
        other_qualifier = create_qualifier(other)
        return Qualifier(
            lambda injectable: self.matches(injectable) and not other_qualifier.matches(injectable),
            f"({self} & !{other_qualifier})",
        )

    def or_not(self, other: QualifierLike) -> Qualifier:
        other_qualifier = create_qualifier(other)
        return Qualifier(
            lambda injectable: self.matches(injectable) or not other_qualifier.matches(injectable),
            f"({self} | !{other_qualifier})",
        )

    def __and__(self, other: QualifierLike) -> Qualifier:
        return self.and_(other)

    def __rand__(self, other: QualifierLike) -> Qualifier:
        return create_qualifier(other).and_(self)

    def __or__(self, other: QualifierLike) -> Qualifier:
        return self.or_(other)

    def __ror__(self, other: QualifierLike) -> Qualifier:
        return create_qualifier(other).or_(self)

    def __str__(self) -> str:
        return self._name

    def __repr__(self) -> str:
        return f"Qualifier({self._name})"


def _display_name(value: Any) -> str:
    if isinstance(value, str):
        return repr(value)
    return getattr(value, "__name__", repr(value))


def create_qualifier(value: QualifierLike) -> Qualifier:
    """Convert a type or name into a qualifier.

    Qualifiers are returned unchanged, so the conversion is idempotent.

    Args:
        value: A ``Qualifier``, a type matched against the injectable's type
            hierarchy, or a name matched against the injectable's names.

    Returns:
        The qualifier.

    """
    if isinstance(value, Qualifier):
        return value
    return Qualifier(lambda injectable: injectable.qualifies_as(value), _display_name(value))


qualifier = create_qualifier
"""Public spelling of ``create_qualifier`` for use in ``Annotated`` metadata."""
