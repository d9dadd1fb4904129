"""Qualifiers: select dependencies by name, by base class or by a combination.

Names passed at registration become qualifiers. ``Annotated`` metadata picks
them for constructor parameters, and list parameters collect every match in
registration order.
"""

from __future__ import annotations

from typing import Annotated

from qualinject import Injector, qualifier

injector = Injector()
injector.inject_value(1, "number", "one")
injector.inject_value(2, "number", "two")
injector.inject_value(3, "number", "three")


class Storage:
    name = "storage"


class DiskStorage(Storage):
    name = "disk"


class Report:
    def __init__(
        self,
        first: Annotated[int, qualifier("one")],
        odd: Annotated[list[int], qualifier("number").and_not("two")],
        storage: Storage,
    ) -> None:
        self.first = first
        self.odd = odd
        self.storage = storage


def main() -> None:
    injector.inject_class(DiskStorage)

    report = injector.create_sync(Report)
    print(f"first={report.first}")  # => first=1
    print(f"odd={report.odd}")  # => odd=[1, 3]
    print(f"storage={report.storage.name}")  # => storage=disk

    numbers = injector.get_all_sync(qualifier("two") | "three")
    print(f"two_or_three={numbers}")  # => two_or_three=[2, 3]


if __name__ == "__main__":
    main()
