"""
MTG Price Finder — Debounced Calls

Cancellable asyncio timer: every call() cancels the pending one and starts
a fresh delay, so only the last call in a burst actually runs.
"""

from __future__ import annotations

import asyncio
from typing import Any, Awaitable, Callable

import structlog

logger = structlog.get_logger(__name__)


class Debouncer:
    """
    Delay an async function until calls have been quiet for `delay` seconds.

    Usage:
        debouncer = Debouncer(fetch_suggestions, delay=0.3)
        debouncer.call("Li")
        debouncer.call("Lig")    # cancels "Li"
        await debouncer.wait()   # fetch_suggestions("Lig") has run
    """

    def __init__(self, func: Callable[..., Awaitable[Any]], delay: float):
        if delay < 0:
            raise ValueError(f"delay must be non-negative, got {delay}")
        self._func = func
        self._delay = delay
        self._task: asyncio.Task[Any] | None = None

    @property
    def pending(self) -> bool:
        return self._task is not None and not self._task.done()

    async def _run(self, args: tuple[Any, ...], kwargs: dict[str, Any]) -> Any:
        await asyncio.sleep(self._delay)
        return await self._func(*args, **kwargs)

    def call(self, *args: Any, **kwargs: Any) -> asyncio.Task[Any]:
        """Schedule func(*args, **kwargs), replacing any pending call."""
        self.cancel()
        self._task = asyncio.get_running_loop().create_task(self._run(args, kwargs))
        return self._task

    def cancel(self) -> None:
        """Drop the pending call, if any."""
        if self.pending:
            assert self._task is not None
            self._task.cancel()
            logger.debug("debounce_cancelled")
        self._task = None

    async def wait(self) -> Any:
        """
        Wait for the pending call to finish and return its result.

        Follows the newest call if the awaited one is superseded while
        waiting. Returns None if nothing is pending or the call was dropped.
        """
        while self._task is not None:
            task = self._task
            try:
                # shield: cancelling the waiter must not cancel the call
                return await asyncio.shield(task)
            except asyncio.CancelledError:
                if task is self._task or not task.cancelled():
                    raise
        return None
