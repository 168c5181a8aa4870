"""
Execution context affinity for the read-through lookup.

asyncpg pools (and the connections they hand out) belong to the event loop
that created them. Every step of a lookup therefore runs on that loop, even
when ``lookup`` is awaited from another loop, and detached work inherits the
caller's contextvars so its log lines keep the request's correlation ID.
"""

import asyncio
import concurrent.futures
import contextvars
from typing import Any, Awaitable, Coroutine, Optional, Union

SpawnedFuture = Union["asyncio.Future[Any]", "concurrent.futures.Future[Any]"]


class ExecutionContext:
    """A bound event loop plus a snapshot of contextvars."""

    def __init__(self, loop: asyncio.AbstractEventLoop, context: Optional[contextvars.Context] = None):
        self.loop = loop
        self.context = context if context is not None else contextvars.copy_context()

    @classmethod
    def capture(cls, loop: Optional[asyncio.AbstractEventLoop] = None) -> "ExecutionContext":
        """Capture the current contextvars, bound to ``loop`` or the running loop."""
        return cls(loop or asyncio.get_running_loop(), contextvars.copy_context())

    def is_current(self) -> bool:
        """True when called from a coroutine running on the bound loop."""
        try:
            return asyncio.get_running_loop() is self.loop
        except RuntimeError:
            return False

    async def run(self, coro: Coroutine[Any, Any, Any]) -> Any:
        """Await ``coro`` on the bound loop and return its result.

        The step runs as its own task behind ``asyncio.shield``: cancelling
        the caller abandons the result but lets the step finish.
        """
        if self.is_current():
            step = self.loop.create_task(coro)
        else:
            step = asyncio.wrap_future(asyncio.run_coroutine_threadsafe(coro, self.loop))
        return await asyncio.shield(step)

    def spawn(self, coro: Coroutine[Any, Any, Any]) -> SpawnedFuture:
        """Start ``coro`` as a detached task on the bound loop.

        The returned future is not awaited by the caller; attach callbacks
        to observe completion.
        """
        if self.is_current():
            return self.loop.create_task(coro, context=self.context)
        # The loop schedules the task under whatever context is current here
        return self.context.run(asyncio.run_coroutine_threadsafe, coro, self.loop)

    def __repr__(self) -> str:
        return f"ExecutionContext(loop={self.loop!r})"


def as_awaitable(future: SpawnedFuture) -> Awaitable[Any]:
    """Adapt a spawned future so it can be awaited on the running loop.

    Tasks owned by another loop are waited for on that loop.
    """
    if isinstance(future, asyncio.Future):
        owner = future.get_loop()
        if owner is not asyncio.get_running_loop():
            return asyncio.wrap_future(asyncio.run_coroutine_threadsafe(asyncio.wait({future}), owner))
        return future
    return asyncio.wrap_future(future)
