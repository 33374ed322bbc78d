"""Bounded pool of in-flight asyncio tasks."""

from __future__ import annotations

import asyncio
from typing import Any, Coroutine, Generic, TypeVar


T = TypeVar("T")


class TaskPool(Generic[T]):
    """Tracks up to `max_concurrent` running tasks on the current event loop.

    The pool does not queue work itself: callers check :attr:`has_capacity` before
    :meth:`spawn`, and use :meth:`wait_any` to block until at least one task finishes.
    """

    def __init__(self, max_concurrent: int = 1) -> None:
        """Initialize task pool.

        Args:
            max_concurrent: Maximum number of tasks in flight.
        """
        if max_concurrent < 1:
            raise ValueError("max_concurrent must be >= 1")
        self.max_concurrent = max_concurrent
        self._tasks: set[asyncio.Task[T]] = set()

    def spawn(self, coro: Coroutine[Any, Any, T], *, name: str | None = None) -> asyncio.Task[T]:
        """Start a task.

        Args:
            coro: Coroutine to run.
            name: Optional task name.

        Returns:
            Task object.

        Raises:
            RuntimeError: If the pool is full.
        """
        if not self.has_capacity:
            coro.close()
            raise RuntimeError("task pool is full")
        task = asyncio.create_task(coro, name=name)
        self._tasks.add(task)
        return task

    async def wait_any(self) -> list[asyncio.Task[T]]:
        """Wait until at least one task completes.

        Completed tasks are removed from the pool and returned; an empty pool returns at once.
        """
        if not self._tasks:
            return []
        done, _ = await asyncio.wait(self._tasks, return_when=asyncio.FIRST_COMPLETED)
        self._tasks.difference_update(done)
        return list(done)

    async def cancel_all(self) -> None:
        """Cancel every task still in flight and wait for them to settle."""
        if not self._tasks:
            return
        for task in self._tasks:
            task.cancel()
        await asyncio.gather(*self._tasks, return_exceptions=True)
        self._tasks.clear()

    @property
    def has_capacity(self) -> bool:
        return len(self._tasks) < self.max_concurrent

    @property
    def active_count(self) -> int:
        """Get number of tasks in flight."""
        return len(self._tasks)
