from __future__ import annotations

import pytest

from qualinject.injector import Injector


@pytest.fixture()
def injector() -> Injector:
    """Create a per-test injector.

    The fixture is function-scoped, so registrations and memoized instances
    are isolated between tests unless users override the fixture scope.

    Enable it with ``pytest_plugins = ["qualinject.integrations.pytest_plugin"]``.

    Returns:
        A new, empty ``Injector``.

    """
    return Injector()
