"""
Repeating timers that drive RSVP playback.

The scheduler only needs two operations: arm a repeating callback with a
period, and cancel it. Two implementations are provided:

- AsyncioTimer: runs on an asyncio event loop; deadlines are computed from
  the previous deadline rather than from when the callback finished, so
  the rate does not drift when a callback runs late. After a stall the
  cadence restarts from the late tick, so two ticks are never closer than
  half a period.
- ManualTimer: virtual clock advanced explicitly; used by tests and by
  headless tools that step playback deterministically.
"""

from __future__ import annotations

import asyncio
import itertools
import logging
from typing import Callable, Optional, Protocol

logger = logging.getLogger(__name__)

TimerCallback = Callable[[], None]


class TimerHandle(Protocol):
    """Handle for a single armed repeating timer."""

    @property
    def active(self) -> bool: ...

    def cancel(self) -> None: ...


class Timer(Protocol):
    """Factory for repeating timers."""

    def arm(self, interval_ms: float, callback: TimerCallback) -> TimerHandle: ...


# =============================================================================
# asyncio
# =============================================================================


class _AsyncioHandle:
    def __init__(
        self,
        loop: asyncio.AbstractEventLoop,
        interval_ms: float,
        callback: TimerCallback,
    ) -> None:
        self._loop = loop
        self._interval = interval_ms / 1000.0
        self._callback = callback
        self._deadline = loop.time() + self._interval
        self._pending: Optional[asyncio.TimerHandle] = loop.call_at(
            self._deadline, self._fire
        )

    @property
    def active(self) -> bool:
        return self._pending is not None

    def cancel(self) -> None:
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None

    def _fire(self) -> None:
        if self._pending is None:
            return

        self._callback()

        # The callback may have cancelled this handle
        if self._pending is None:
            return

        self._deadline += self._interval
        now = self._loop.time()
        # Never bunch ticks after a stall; restart the cadence from now
        if self._deadline - now < self._interval / 2:
            logger.debug("Timer tick ran late; restarting cadence")
            self._deadline = now + self._interval
        self._pending = self._loop.call_at(self._deadline, self._fire)


class AsyncioTimer:
    """Repeating timer backed by an asyncio event loop."""

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None) -> None:
        self._loop = loop

    def arm(self, interval_ms: float, callback: TimerCallback) -> _AsyncioHandle:
        if interval_ms <= 0:
            raise ValueError(f"interval_ms must be positive, got {interval_ms}")
        loop = self._loop or asyncio.get_running_loop()
        return _AsyncioHandle(loop, interval_ms, callback)


# =============================================================================
# Virtual clock
# =============================================================================


class _ManualHandle:
    def __init__(
        self,
        owner: "ManualTimer",
        interval_ms: float,
        callback: TimerCallback,
        order: int,
    ) -> None:
        self._owner = owner
        self.interval_ms = interval_ms
        self.callback = callback
        self.order = order
        self.next_due = owner.now_ms + interval_ms
        self._active = True

    @property
    def active(self) -> bool:
        return self._active

    def cancel(self) -> None:
        if self._active:
            self._active = False
            self._owner._handles.discard(self)


class ManualTimer:
    """
    Deterministic timer driven by a virtual clock.

    Nothing fires until advance() is called. Callbacks fire in deadline
    order; ties fire in the order the timers were armed.

    Example:
        >>> timer = ManualTimer()
        >>> ticks = []
        >>> handle = timer.arm(200, lambda: ticks.append(timer.now_ms))
        >>> timer.advance(600)
        >>> ticks
        [200.0, 400.0, 600.0]
    """

    def __init__(self) -> None:
        self.now_ms: float = 0.0
        self.armed_total = 0
        self._handles: set[_ManualHandle] = set()
        self._order = itertools.count()

    @property
    def active_count(self) -> int:
        """Number of timers currently armed."""
        return len(self._handles)

    def arm(self, interval_ms: float, callback: TimerCallback) -> _ManualHandle:
        if interval_ms <= 0:
            raise ValueError(f"interval_ms must be positive, got {interval_ms}")

        handle = _ManualHandle(self, interval_ms, callback, next(self._order))
        self._handles.add(handle)
        self.armed_total += 1
        return handle

    def advance(self, ms: float) -> None:
        """Move the virtual clock forward, firing every callback that falls due."""
        target = self.now_ms + ms

        while True:
            due = [h for h in self._handles if h.next_due <= target]
            if not due:
                break

            handle = min(due, key=lambda h: (h.next_due, h.order))
            self.now_ms = handle.next_due
            handle.next_due += handle.interval_ms
            handle.callback()

        self.now_ms = target
