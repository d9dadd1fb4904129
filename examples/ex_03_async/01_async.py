"""Async: one asynchronous factory makes every dependent deferred.

``get`` returns plain values for synchronous graphs and awaitables otherwise.
``get_async`` gives a uniform awaitable view, and once a deferred dependency
has settled it is available synchronously as well.
"""

from __future__ import annotations

import asyncio

from qualinject import Deferred, Injector

injector = Injector()


class Connection:
    def __init__(self, dsn: str) -> None:
        self.dsn = dsn


@injector.injectable
async def connect() -> Connection:
    await asyncio.sleep(0)
    return Connection("postgresql://localhost/app")


@injector.injectable
class UserRepository:
    def __init__(self, connection: Connection) -> None:
        self.connection = connection


async def main() -> None:
    pending = injector.get(UserRepository)
    print(f"deferred={isinstance(pending, Deferred)}")  # => deferred=True

    repository = await injector.get_async(UserRepository)
    print(f"dsn={repository.connection.dsn}")  # => dsn=postgresql://localhost/app

    print(f"settled={injector.get_sync(UserRepository) is repository}")  # => settled=True


if __name__ == "__main__":
    asyncio.run(main())
