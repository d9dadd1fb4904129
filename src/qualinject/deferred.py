from __future__ import annotations

import asyncio
import inspect
from collections.abc import Awaitable, Callable, Generator
from typing import Any, Generic, TypeVar

T = TypeVar("T")


class Deferred(Generic[T]):
    """A shareable handle on a value that becomes available asynchronously.

    A bare coroutine can only be awaited once, but a memoized dependency is
    handed to every consumer. ``Deferred`` runs the wrapped awaitable exactly
    once as an ``asyncio`` task and lets any number of callers await it.

    The task is started immediately when an event loop is running, otherwise on
    the first ``await``. Callbacks registered with ``add_done_callback`` run
    with the settled value before any awaiting caller resumes.

    Awaiting callers are shielded from each other: cancelling one of them does
    not cancel the shared task. The task itself is only cancelled by
    ``discard`` or by the shutdown of the event loop it runs on.
    """

    def __init__(self, awaitable: Awaitable[T]) -> None:
        self._awaitable = awaitable
        self._callbacks: list[Callable[[T], Any]] = []
        self._task: asyncio.Future[T] | None = None
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            pass
        else:
            self._schedule()

    def add_done_callback(self, callback: Callable[[T], Any]) -> None:
        """Run *callback* with the value once the deferred value settles successfully."""
        if self._task is not None and self._task.done() and not self._task.cancelled():
            if self._task.exception() is None:
                callback(self._task.result())
            return
        self._callbacks.append(callback)

    def done(self) -> bool:
        return self._task is not None and self._task.done()

    def cancelled(self) -> bool:
        return self._task is not None and self._task.cancelled()

    def discard(self) -> None:
        """Stop the wrapped work, which nobody is going to await.

        A scheduled task is cancelled. An unscheduled coroutine is closed so it
        is not reported as never awaited.
        """
        if self._task is not None:
            self._task.cancel()
        elif inspect.iscoroutine(self._awaitable):
            self._awaitable.close()

    def _schedule(self) -> asyncio.Future[T]:
        if self._task is None:
            self._task = asyncio.ensure_future(self._awaitable)
            self._task.add_done_callback(self._notify)
        return self._task

    def _notify(self, task: asyncio.Future[T]) -> None:
        if task.cancelled() or task.exception() is not None:
            return
        callbacks, self._callbacks = self._callbacks, []
        for callback in callbacks:
            callback(task.result())

    def __await__(self) -> Generator[Any, None, T]:
        return asyncio.shield(self._schedule()).__await__()

    def __repr__(self) -> str:
        if self.cancelled():
            state = "cancelled"
        elif self.done():
            state = "settled"
        else:
            state = "pending"
        return f"Deferred({state})"


def is_deferred(value: Any) -> bool:
    """Return whether *value* must be awaited before it can be used."""
    return inspect.isawaitable(value)


def as_deferred(value: Awaitable[T]) -> Deferred[T]:
    """Wrap an awaitable into a ``Deferred`` unless it already is one."""
    if isinstance(value, Deferred):
        return value
    return Deferred(value)


async def settle(value: Any) -> Any:
    """Await *value* when it is deferred and return it unchanged otherwise."""
    if is_deferred(value):
        return await value
    return value


async def gather(values: list[Any]) -> list[Any]:
    """Settle all *values* concurrently, keeping their order."""
    return list(await asyncio.gather(*(settle(value) for value in values)))
