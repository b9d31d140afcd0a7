# Author: Green Mountain Systems AI Inc.
# Donated to IAB Tech Lab

"""Debounced triggers and stale-response protection for searches."""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Any, Optional

logger = logging.getLogger(__name__)

SleepFn = Callable[[float], Awaitable[Any]]


class Debouncer:
    """Cancellable timer that fires a callback after a quiet period.

    Every ``schedule`` call resets the timer, so only the most recent
    arguments reach the callback. The sleep primitive is injectable.
    """

    def __init__(
        self,
        callback: Callable[..., Awaitable[Any]],
        wait: float,
        sleep: SleepFn = asyncio.sleep,
    ):
        """Initialize the debouncer.

        Args:
            callback: Coroutine function to call once input settles
            wait: Quiet period in seconds
            sleep: Coroutine used to wait, replaceable in tests
        """
        self._callback = callback
        self.wait = wait
        self._sleep = sleep
        self._task: Optional[asyncio.Task] = None
        self._args: tuple[Any, ...] = ()
        self._kwargs: dict[str, Any] = {}

    @property
    def pending(self) -> bool:
        """Whether a call is scheduled and has not fired yet."""
        return self._task is not None and not self._task.done()

    def schedule(self, *args: Any, **kwargs: Any) -> asyncio.Task:
        """Schedule the callback, replacing any pending call."""
        self.cancel()
        self._args = args
        self._kwargs = kwargs
        self._task = asyncio.ensure_future(self._fire_after_wait(args, kwargs))
        return self._task

    def cancel(self) -> None:
        """Drop the pending call, if any."""
        if self.pending:
            self._task.cancel()
        self._task = None

    async def flush(self) -> Any:
        """Fire the pending call now instead of waiting."""
        if not self.pending:
            return None
        self.cancel()
        return await self._callback(*self._args, **self._kwargs)

    async def _fire_after_wait(self, args: tuple[Any, ...], kwargs: dict[str, Any]) -> Any:
        await self._sleep(self.wait)
        return await self._callback(*args, **kwargs)


class RequestSequencer:
    """Hands out request tickets so out-of-order responses can be dropped."""

    def __init__(self, name: str = "request"):
        self.name = name
        self._latest = 0

    @property
    def latest(self) -> int:
        return self._latest

    def next_ticket(self) -> int:
        """Issue the ticket for a new request."""
        self._latest += 1
        return self._latest

    def is_current(self, ticket: int) -> bool:
        """Whether a response for ``ticket`` may still be applied."""
        if ticket != self._latest:
            logger.warning(
                f"Discarding stale {self.name} response #{ticket} (latest is #{self._latest})"
            )
            return False
        return True
