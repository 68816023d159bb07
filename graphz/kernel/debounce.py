"""
GRAPHZ Kernel: Debouncer

Coalesces bursts of calls into one, fired after a quiet period on the
asyncio event loop. Each `schedule` cancels the pending timer and starts a
new one, so only the last call in a burst runs.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable


class Debouncer:
    """Single-slot cancellable timer bound to an event loop."""

    def __init__(
        self,
        delay: float,
        callback: Callable[[], None],
        *,
        loop: asyncio.AbstractEventLoop | None = None,
    ) -> None:
        if delay < 0:
            raise ValueError(f"delay must be >= 0, got {delay}")
        self.delay = delay
        self._callback = callback
        self._loop = loop
        self._handle: asyncio.TimerHandle | None = None

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def schedule(self) -> None:
        """(Re)start the quiet period. A previously scheduled call is dropped."""
        self.cancel()
        loop = self._loop or asyncio.get_running_loop()
        self._handle = loop.call_later(self.delay, self._fire)

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _fire(self) -> None:
        self._handle = None
        self._callback()
