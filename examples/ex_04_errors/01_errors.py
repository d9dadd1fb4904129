"""Errors: missing, ambiguous and asynchronous dependencies.

Every failure is an ``InjectionError`` raised straight to the caller.
"""

from __future__ import annotations

import asyncio

from qualinject import (
    AmbiguousDependencyError,
    AsyncDependencyInSyncContextError,
    DependencyNotFoundError,
    Injector,
    InvalidParameterError,
)

injector = Injector()
injector.inject_value(1, "n")
injector.inject_value(2, "n")


async def load_settings() -> dict[str, str]:
    return {"mode": "async"}


class Consumer:
    def __init__(self, numbers: list[int]) -> None:
        self.numbers = numbers


async def main() -> None:
    try:
        injector.get("missing")
    except DependencyNotFoundError as error:
        print(error)  # => No dependency found for qualifier: 'missing'

    try:
        injector.get_sync("n")
    except AmbiguousDependencyError as error:
        print(error)  # => More than one dependency found for qualifier: 'n'
    print(f"all={injector.get_all_sync('n')}")  # => all=[1, 2]

    injector.inject_factory(dict, load_settings, "settings")
    try:
        injector.get_sync("settings")
    except AsyncDependencyInSyncContextError as error:
        print(error)  # => Asynchronous dependency found during synchronous resolving for qualifier: 'settings'
    settings = await injector.get_async("settings")
    print(f"mode={settings['mode']}")  # => mode=async

    try:
        injector.inject_class(Consumer)
    except InvalidParameterError as error:
        print(type(error).__name__)  # => InvalidParameterError


if __name__ == "__main__":
    asyncio.run(main())
