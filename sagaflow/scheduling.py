"""
Delivery of asynchronous producer results back to an interpreter.

The interpreter itself never awaits. On an ``await_for`` miss it hands the
producer's awaitable to a scheduler together with a callback, and the
scheduler calls back once the awaitable has settled.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Awaitable, Callable
from typing import Any, Protocol

logger = logging.getLogger(__name__)

SettledCallback = Callable[["asyncio.Future[Any]"], None]


class Scheduler(Protocol):
    def submit(self, awaitable: Awaitable[Any], on_settled: SettledCallback) -> None: ...


class AsyncioScheduler:
    """Runs producers as asyncio tasks.

    Tasks are kept referenced until they settle. ``terminate()`` on an
    interpreter does not cancel them; their results are simply ignored.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self._loop = loop
        self._pending: set[asyncio.Future[Any]] = set()

    @property
    def pending(self) -> int:
        return len(self._pending)

    def submit(self, awaitable: Awaitable[Any], on_settled: SettledCallback) -> None:
        loop = self._loop
        if loop is None:
            try:
                loop = asyncio.get_running_loop()
            except RuntimeError:
                if inspect.iscoroutine(awaitable):
                    awaitable.close()
                raise
        task = asyncio.ensure_future(awaitable, loop=loop)
        self._pending.add(task)

        def settled(done: asyncio.Future[Any]) -> None:
            self._pending.discard(done)
            on_settled(done)

        task.add_done_callback(settled)
        logger.debug("Submitted %r (%d pending)", task, len(self._pending))

    async def drain(self) -> None:
        """Wait until no submitted task is in flight, including ones submitted meanwhile."""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)
            # Let done-callbacks scheduled by the last completions run.
            await asyncio.sleep(0)


__all__ = [
    "AsyncioScheduler",
    "Scheduler",
    "SettledCallback",
]
