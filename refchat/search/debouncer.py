"""Quiet-period scheduling of a single callback."""

import asyncio
from typing import Callable


class Debouncer:
    """Owns one scheduled timer; every `schedule` call replaces the previous one.

    Cancelling only drops the timer that has not fired yet. Work the callback
    already started is left alone.
    """

    def __init__(self, delay: float) -> None:
        self.delay = delay
        self._handle: asyncio.TimerHandle | None = None

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def schedule(self, callback: Callable[[], None]) -> None:
        """Run callback after `delay` seconds unless rescheduled or cancelled first."""
        self.cancel()
        loop = asyncio.get_running_loop()
        self._handle = loop.call_later(self.delay, self._fire, callback)

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _fire(self, callback: Callable[[], None]) -> None:
        self._handle = None
        callback()
