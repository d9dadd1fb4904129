"""Quickstart: register classes and let the injector wire them from type hints.

Every registration is a singleton. Resolving the top-level service builds the
whole chain once and later lookups return the same instances.
"""

from __future__ import annotations

from qualinject import Injector

injector = Injector()


@injector.injectable
class Database:
    def __init__(self) -> None:
        self.host = "localhost"


@injector.injectable
class UserRepository:
    def __init__(self, database: Database) -> None:
        self.database = database


@injector.injectable
class UserService:
    def __init__(self, repository: UserRepository) -> None:
        self.repository = repository


def main() -> None:
    service = injector.get_sync(UserService)

    print(f"db_host={service.repository.database.host}")  # => db_host=localhost

    chain = (
        f"{type(service).__name__}"
        f">{type(service.repository).__name__}"
        f">{type(service.repository.database).__name__}"
    )
    print(f"chain={chain}")  # => chain=UserService>UserRepository>Database
    print(f"singleton={injector.get_sync(Database) is service.repository.database}")  # => singleton=True


if __name__ == "__main__":
    main()
