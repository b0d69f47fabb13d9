"""Single-flight guard for coroutines.

Concurrent callers asking for the same key share one running execution
instead of starting their own. Per key the guard is IDLE (no task) or
IN_FLIGHT (one task); the task is forgotten as soon as it finishes, whatever
the outcome, so a failure or timeout never leaves a key stuck.
"""

import asyncio
from collections.abc import Awaitable, Callable
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


class SingleFlight(Generic[T]):
    """Deduplicates concurrent executions by key.

    Bound to the event loop it is first used on.
    """

    def __init__(self) -> None:
        self._in_flight: dict[str, asyncio.Task[T]] = {}

    def in_flight(self, key: str) -> Optional[asyncio.Task[T]]:
        """The running execution for a key, if any."""
        return self._in_flight.get(key)

    async def do(self, key: str, fn: Callable[[], Awaitable[T]]) -> T:
        """Run fn, or attach to the execution already running for key.

        A caller being cancelled does not cancel the shared execution.

        Args:
            key: Deduplication scope
            fn: Coroutine factory, only called when no execution is running

        Returns:
            The shared execution's result

        Raises:
            Whatever the shared execution raised
        """
        task = self._in_flight.get(key)
        if task is None:
            task = asyncio.ensure_future(fn())
            self._in_flight[key] = task
            task.add_done_callback(lambda done: self._forget(key, done))
        return await asyncio.shield(task)

    async def wait(self, key: str) -> None:
        """Wait for the running execution of a key to finish, ignoring its outcome."""
        task = self._in_flight.get(key)
        if task is None:
            return
        await asyncio.wait({task})

    def _forget(self, key: str, task: asyncio.Task[T]) -> None:
        if self._in_flight.get(key) is task:
            del self._in_flight[key]
        # Mark the exception retrieved when every caller has gone away
        if not task.cancelled():
            task.exception()
