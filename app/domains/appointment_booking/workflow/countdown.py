# ============================================================================
# SCOPE: WORKFLOW LAYER (Appointment Booking)
# Description: Cancelable countdown that redirects away from the success view.
# ============================================================================
"""Redirect Countdown.

Counts down once per tick and fires a one-way navigation callback at zero.
The countdown must be cancelled when the patient leaves the view first, and
``close()`` must be awaited on teardown so the callback can never fire
after the view is gone.
"""

import asyncio
import inspect
import logging
from collections.abc import Awaitable, Callable

logger = logging.getLogger(__name__)


class RedirectCountdown:
    """Background countdown owned by the booking controller."""

    def __init__(
        self,
        seconds: int,
        on_expire: Callable[[], Awaitable[object] | object],
        tick: float = 1.0,
    ):
        """Initialize countdown.

        Args:
            seconds: Number of ticks before ``on_expire`` fires.
            on_expire: Callback (sync or async) run once at zero.
            tick: Tick length in seconds.
        """
        self._seconds = seconds
        self._remaining = seconds
        self._on_expire = on_expire
        self._tick = tick
        self._task: asyncio.Task | None = None
        self._expired = False

    @property
    def remaining(self) -> int:
        return self._remaining

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def expired(self) -> bool:
        return self._expired

    def start(self) -> None:
        """Start counting. No-op if already running or already expired."""
        if self.is_running or self._expired:
            return
        self._remaining = self._seconds
        self._task = asyncio.create_task(self._run())
        logger.debug(f"Redirect countdown started ({self._seconds}s)")

    async def _run(self) -> None:
        while self._remaining > 0:
            await asyncio.sleep(self._tick)
            self._remaining -= 1

        self._expired = True
        logger.info("Redirect countdown expired")
        result = self._on_expire()
        if inspect.isawaitable(result):
            await result

    def cancel(self) -> None:
        """Stop the countdown without waiting for the task to finish.

        Safe to call from the expiry callback itself.
        """
        task = self._task
        if task is None or task.done() or task is asyncio.current_task():
            return
        task.cancel()
        logger.debug("Redirect countdown cancelled")

    async def close(self) -> None:
        """Cancel and wait until the task is fully released."""
        task = self._task
        self.cancel()
        if task is None or task is asyncio.current_task():
            return
        try:
            await task
        except asyncio.CancelledError:
            pass
        finally:
            self._task = None
