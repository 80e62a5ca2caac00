"""Resettable wall-clock timers for debounced scheduling.

Both timers run on the asyncio event loop via ``loop.call_later``. Each arm
issues a fresh token and the firing handle compares its token with the current
one before running the callback, so cancellation holds even when the loop has
already queued the handle.
"""

import asyncio
from collections.abc import Callable

TimerCallback = Callable[[], None]


class _OneShotTimer:
    def __init__(self, loop: asyncio.AbstractEventLoop | None) -> None:
        self._loop = loop
        self._handle: asyncio.TimerHandle | None = None
        self._token: object | None = None

    @property
    def pending(self) -> bool:
        return self._token is not None

    def arm(self, delay_seconds: float, callback: TimerCallback) -> None:
        self.cancel()
        token = object()
        loop = self._loop or asyncio.get_running_loop()
        self._token = token
        self._handle = loop.call_later(delay_seconds, self._fire, token, callback)

    def cancel(self) -> None:
        self._token = None
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _fire(self, token: object, callback: TimerCallback) -> None:
        if token is not self._token:
            return
        self._token = None
        self._handle = None
        callback()


class TimerController:
    """Trailing debounce timer plus an independent absolute max-wait timer."""

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self._debounce = _OneShotTimer(loop)
        self._max_wait = _OneShotTimer(loop)

    @property
    def debounce_pending(self) -> bool:
        return self._debounce.pending

    @property
    def max_wait_pending(self) -> bool:
        return self._max_wait.pending

    def arm_debounce(self, delay_seconds: float, callback: TimerCallback) -> None:
        """Restart the debounce countdown; only the last call in a burst fires."""
        self._debounce.arm(delay_seconds, callback)

    def arm_max_wait(self, delay_seconds: float, callback: TimerCallback) -> None:
        """Arm the deadline timer unless it is already counting down."""
        if self._max_wait.pending:
            return
        self._max_wait.arm(delay_seconds, callback)

    def cancel_debounce(self) -> None:
        self._debounce.cancel()

    def cancel_max_wait(self) -> None:
        self._max_wait.cancel()

    def cancel_all(self) -> None:
        """Cancel both timers. Safe to call any number of times."""
        self._debounce.cancel()
        self._max_wait.cancel()
