"""
debounce.py - Debounced fetch trigger
Single responsibility: collapse bursts of filter changes into one call.
"""

import asyncio
import logging
from typing import Any, Awaitable, Callable

from portal.config import DEBOUNCE_SECONDS

logger = logging.getLogger(__name__)

AsyncCallback = Callable[[], Awaitable[Any]]
Spawner = Callable[[AsyncCallback], Any]


def _spawn_task(coro_fn: AsyncCallback) -> asyncio.Task:
    return asyncio.get_running_loop().create_task(coro_fn())


class Debouncer:
    """
    Idle -> trigger() -> Waiting -> (delay elapses) -> callback -> Idle.

    trigger() while Waiting re-arms the timer, so only the last change of a
    burst reaches the callback. trigger() while the callback is running arms
    a fresh timer and leaves the running call alone. When ``guard`` returns
    False no timer is armed and an armed timer does not fire.

    ``spawn`` schedules a coroutine function and returns something with
    ``cancel()``/``done()``; Flet's ``page.run_task`` fits, and so does the
    default which creates an asyncio task on the running loop.
    """

    def __init__(
        self,
        callback: AsyncCallback,
        delay: float = DEBOUNCE_SECONDS,
        guard: Callable[[], bool] | None = None,
        spawn: Spawner | None = None,
    ):
        self.callback = callback
        self.delay = delay
        self.guard = guard
        self._spawn = spawn or _spawn_task
        self._pending = None
        self._generation = 0
        self._closed = False

    def _allowed(self) -> bool:
        if self._closed:
            return False
        return self.guard is None or bool(self.guard())

    @property
    def is_waiting(self) -> bool:
        return self._pending is not None and not self._pending.done()

    def trigger(self):
        """Arm (or re-arm) the timer. Returns the scheduled handle, or None."""
        if not self._allowed():
            self.cancel()
            return None
        self.cancel()
        self._generation += 1
        generation = self._generation

        async def runner():
            try:
                await asyncio.sleep(self.delay)
            except asyncio.CancelledError:
                return
            if generation != self._generation or not self._allowed():
                return
            # Past this point a new trigger() must not cancel the running call
            self._pending = None
            try:
                await self.callback()
            except Exception:
                logger.exception("Debounced callback failed")

        self._pending = self._spawn(runner)
        return self._pending

    def cancel(self) -> None:
        """Disarm a waiting timer. A callback already running is not touched."""
        if self._pending is not None and not self._pending.done():
            self._pending.cancel()
        self._pending = None

    def close(self) -> None:
        """Teardown: disarm and refuse further triggers."""
        self._closed = True
        self.cancel()
