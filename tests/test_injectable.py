"""Tests for Injectable creation and memoization."""

import asyncio
from dataclasses import dataclass
from typing import Annotated

import pytest

from qualinject.deferred import Deferred
from qualinject.injectable import Injectable, InstanceState
from qualinject.injector import Injector
from qualinject.qualifier import qualifier


class Base:
    pass


class Derived(Base):
    pass


@dataclass
class Dependency:
    a: int = 12


def test_from_value_without_names() -> None:
    injectable = Injectable.from_value(123)

    assert injectable.type is int
    assert injectable.names == ()
    assert injectable.get_instance() == 123


def test_from_class_uses_class_as_factory() -> None:
    injectable = Injectable.from_class(Derived, ["derived"])

    assert injectable.factory is Derived
    assert injectable.parameters == []
    assert isinstance(injectable.get_instance(), Derived)


def test_qualifies_as_name() -> None:
    injectable = Injectable.from_class(Derived, ["first", "second"])

    assert injectable.qualifies_as("first")
    assert injectable.qualifies_as("second")
    assert not injectable.qualifies_as("third")


def test_qualifies_as_type_hierarchy() -> None:
    injectable = Injectable.from_class(Derived)

    assert injectable.qualifies_as(Derived)
    assert injectable.qualifies_as(Base)
    assert injectable.qualifies_as(object)
    assert not injectable.qualifies_as(Dependency)


def test_get_instance_is_memoized() -> None:
    injectable = Injectable.from_class(Derived)

    first = injectable.get_instance()
    second = injectable.get_instance()

    assert first is second


def test_create_instance_is_not_memoized() -> None:
    injectable = Injectable.from_class(Derived)

    assert injectable.create_instance() is not injectable.create_instance()
    assert injectable.instance_state is InstanceState.UNRESOLVED


def test_factory_is_called_once() -> None:
    calls = []

    def factory() -> Derived:
        calls.append(1)
        return Derived()

    injectable = Injectable.from_factory(Derived, factory)
    injectable.get_instance()
    injectable.get_instance()

    assert calls == [1]


def test_instance_slot_is_in_progress_while_factory_runs() -> None:
    observed = []

    def factory() -> Derived:
        observed.append(injectable.get_instance())
        return Derived()

    injectable = Injectable.from_factory(Derived, factory)
    instance = injectable.get_instance()

    assert observed == [InstanceState.IN_PROGRESS]
    assert injectable.instance_state is instance


def test_failed_factory_leaves_slot_in_progress() -> None:
    def factory() -> Derived:
        raise RuntimeError("boom")

    injectable = Injectable.from_factory(Derived, factory)

    with pytest.raises(RuntimeError, match="boom"):
        injectable.get_instance()
    assert injectable.instance_state is InstanceState.IN_PROGRESS


def test_synchronous_dependencies_create_synchronous_instance(injector: Injector) -> None:
    injector.inject_class(Dependency)

    class Test:
        def __init__(self, dep: Dependency) -> None:
            self.dep = dep

    injectable = Injectable.from_class(Test).bind(injector)
    test = injectable.create_instance()

    assert isinstance(test, Test)
    assert test.dep.a == 12


async def test_async_factory_creates_deferred_instance() -> None:
    async def create() -> Dependency:
        await asyncio.sleep(0)
        return Dependency(42)

    injectable = Injectable.from_factory(Dependency, create)
    deferred = injectable.get_instance()

    assert isinstance(deferred, Deferred)
    assert (await deferred).a == 42


async def test_settled_deferred_is_replaced_by_value() -> None:
    async def create() -> Dependency:
        return Dependency(7)

    injectable = Injectable.from_factory(Dependency, create)
    deferred = injectable.get_instance()
    value = await deferred

    assert injectable.instance_state is value
    assert injectable.get_instance() is value


async def test_cancelled_deferred_instance_is_created_again() -> None:
    async def create() -> Dependency:
        return Dependency(7)

    injectable = Injectable.from_factory(Dependency, create)
    cancelled = injectable.get_instance()
    cancelled.discard()
    with pytest.raises(asyncio.CancelledError):
        await cancelled

    recreated = injectable.get_instance()

    assert recreated is not cancelled
    assert (await recreated).a == 7


async def test_async_dependency_defers_dependent(injector: Injector) -> None:
    @dataclass
    class AsyncDependency:
        a: int = 2

    async def create_async_dependency() -> AsyncDependency:
        return AsyncDependency()

    injector.inject_class(Dependency)
    injector.inject_factory(AsyncDependency, create_async_dependency)

    class Test:
        def __init__(self, dep1: Dependency, dep2: AsyncDependency) -> None:
            self.a = dep1.a * dep2.a

    injectable = Injectable.from_class(Test).bind(injector)
    deferred = injectable.create_instance()

    assert isinstance(deferred, Deferred)
    assert (await deferred).a == 24


async def test_deferred_arguments_are_awaited_concurrently(injector: Injector) -> None:
    started: list[str] = []
    release = asyncio.Event()

    async def make(name: str) -> str:
        started.append(name)
        await release.wait()
        return name

    injector.inject_factory(str, lambda: make("first"), "first")
    injector.inject_factory(str, lambda: make("second"), "second")

    def factory(
        first: Annotated[str, qualifier("first")],
        second: Annotated[str, qualifier("second")],
    ) -> tuple[str, str]:
        return first, second

    deferred = Injectable.from_factory(tuple, factory).bind(injector).create_instance()
    await asyncio.sleep(0)
    await asyncio.sleep(0)

    assert sorted(started) == ["first", "second"]
    release.set()
    assert await deferred == ("first", "second")


def test_repr() -> None:
    assert repr(Injectable.from_class(Derived)) == "Injectable(Derived)"
    assert repr(Injectable.from_value(1, ["one"])) == "Injectable(int, names=['one'])"
