"""
RSVP playback engine.

- timer: repeating timers (asyncio and virtual clock)
- scheduler: PlaybackScheduler state machine
- input_router: key and control routing
- accounting: progress / estimate / focal split derivation
- reader: ReaderSession facade with entitlement and persistence hooks
"""

from .timer import AsyncioTimer, ManualTimer, Timer, TimerHandle
from .scheduler import PlaybackScheduler, PlaybackSnapshot, PlaybackState
from .input_router import DEFAULT_KEY_BINDINGS, InputRouter, KeyEvent
from .accounting import ReaderView, SessionAccounting
from .reader import LoadResult, ReaderSession

__all__ = [
    "Timer",
    "TimerHandle",
    "AsyncioTimer",
    "ManualTimer",
    "PlaybackScheduler",
    "PlaybackSnapshot",
    "PlaybackState",
    "InputRouter",
    "KeyEvent",
    "DEFAULT_KEY_BINDINGS",
    "SessionAccounting",
    "ReaderView",
    "ReaderSession",
    "LoadResult",
]
