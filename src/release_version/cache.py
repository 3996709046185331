"""In-flight request deduplication.

InFlightCache collapses concurrent requests for the same key into a
single asyncio task. Every caller asking for a key while its task is
pending gets the same task and therefore the same result or exception.
Entries are dropped as soon as the task settles, so the next request
for the key starts fresh: nothing is retained, evicted or expired.

The cache is not thread safe. It relies on the event loop running
check-then-insert sequences without a suspension point in between.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Any, Generic, TypeVar

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

logger = logging.getLogger(__name__)

T = TypeVar("T")


class InFlightCache(Generic[T]):
    """Maps string keys to pending or just-settled asyncio tasks."""

    def __init__(self) -> None:
        self._entries: dict[str, asyncio.Future[T]] = {}

    def get(self, key: str) -> asyncio.Future[T] | None:
        return self._entries.get(key)

    def set(self, key: str, computation: Awaitable[T]) -> asyncio.Future[T]:
        """Register a computation under ``key``, replacing any prior entry.

        Args:
            key: Cache key
            computation: Coroutine or future to run

        Returns:
            The task wrapping the computation
        """
        task = asyncio.ensure_future(computation)
        self._entries[key] = task
        task.add_done_callback(lambda done: self._settle(key, done))
        return task

    def delete(self, key: str) -> None:
        self._entries.pop(key, None)

    async def run(self, key: str, factory: Callable[[], Awaitable[T]]) -> T:
        """Await the in-flight computation for ``key``, starting it if needed.

        ``factory`` is only called when no computation is pending for the key.
        Cancelling a caller cancels only its wait; the computation keeps
        running for the other callers.
        """
        task = self.get(key)
        if task is None:
            logger.debug("Starting request %s", key)
            task = self.set(key, factory())
        else:
            logger.debug("Joining in-flight request %s", key)
        return await asyncio.shield(task)

    def _settle(self, key: str, task: asyncio.Future[Any]) -> None:
        # A replacement registered with set() must outlive its predecessor
        if self._entries.get(key) is task:
            del self._entries[key]

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)
