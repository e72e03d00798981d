"""
Playback scheduler for RSVP reading.

PlaybackScheduler is an explicit state machine that owns the reading
position, the playback rate and the repeating timer:

    IDLE  --load(tokens)-->  READY  --play()-->  PLAYING
      ^                        ^                    |
      |                        +--pause()/end/------+
      |                           restart()
      +------------------ unload() -----------------+

Every operation is a no-op when no tokens are loaded (except load), and
none of them raise on misuse, so stale or repeated UI events are harmless.
The timer is disarmed on every transition out of PLAYING; at most one
timer is armed at any time.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Optional, Sequence, Tuple

from readfast.models.enums import PlaybackStatus
from readfast.services.tokenizer.constants import DEFAULT_WPM, MAX_WPM, MIN_WPM
from readfast.services.tokenizer.timing import calculate_interval_ms
from readfast.services.playback.timer import Timer, TimerHandle

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PlaybackSnapshot:
    """Read-only view of the scheduler state at one instant."""

    tokens: Tuple[str, ...]
    cursor: int
    rate: int
    is_playing: bool
    status: PlaybackStatus
    min_rate: int
    max_rate: int

    @property
    def total(self) -> int:
        return len(self.tokens)

    @property
    def current_token(self) -> str:
        if not self.tokens:
            return ""
        return self.tokens[self.cursor]

    @property
    def at_end(self) -> bool:
        return bool(self.tokens) and self.cursor >= len(self.tokens) - 1


Listener = Callable[[PlaybackSnapshot], None]


@dataclass
class PlaybackState:
    """Mutable playback state, owned exclusively by PlaybackScheduler."""

    tokens: Tuple[str, ...] = ()
    cursor: int = 0
    rate: int = DEFAULT_WPM
    is_playing: bool = False


def clamp(value: int, lower: int, upper: int) -> int:
    """Clamp value into [lower, upper]."""
    return max(lower, min(upper, value))


class PlaybackScheduler:
    """
    Timer-driven RSVP playback state machine.

    Args:
        timer: Timer used to arm the repeating advance.
        min_rate: Lowest accepted rate in WPM.
        max_rate: Effective rate ceiling in WPM; supplied by the caller so
            tier limits stay outside the engine.
        rate: Initial rate, clamped into [min_rate, max_rate].
    """

    def __init__(
        self,
        timer: Timer,
        *,
        min_rate: int = MIN_WPM,
        max_rate: int = MAX_WPM,
        rate: int = DEFAULT_WPM,
    ) -> None:
        if min_rate <= 0:
            raise ValueError(f"min_rate must be positive, got {min_rate}")

        self._timer = timer
        self._min_rate = min_rate
        self._max_rate = max(min_rate, max_rate)
        self._state = PlaybackState(rate=clamp(rate, self._min_rate, self._max_rate))
        self._handle: Optional[TimerHandle] = None
        self._listeners: list[Listener] = []

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    @property
    def tokens(self) -> Tuple[str, ...]:
        return self._state.tokens

    @property
    def cursor(self) -> int:
        return self._state.cursor

    @property
    def rate(self) -> int:
        return self._state.rate

    @property
    def min_rate(self) -> int:
        return self._min_rate

    @property
    def max_rate(self) -> int:
        return self._max_rate

    @property
    def is_playing(self) -> bool:
        return self._state.is_playing

    @property
    def interval_ms(self) -> float:
        """Current period between advances."""
        return calculate_interval_ms(self._state.rate)

    @property
    def status(self) -> PlaybackStatus:
        if not self._state.tokens:
            return PlaybackStatus.IDLE
        if self._state.is_playing:
            return PlaybackStatus.PLAYING
        return PlaybackStatus.READY

    def snapshot(self) -> PlaybackSnapshot:
        """Return an immutable copy of the current state."""
        state = self._state
        return PlaybackSnapshot(
            tokens=state.tokens,
            cursor=state.cursor,
            rate=state.rate,
            is_playing=state.is_playing,
            status=self.status,
            min_rate=self._min_rate,
            max_rate=self._max_rate,
        )

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """
        Register a listener called with a snapshot after every state change.

        Returns:
            A callable that removes the listener again.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # -------------------------------------------------------------------------
    # Commands
    # -------------------------------------------------------------------------

    def load(self, tokens: Sequence[str]) -> None:
        """Replace the token sequence, rewinding to the start, paused."""
        self._disarm()
        self._state.tokens = tuple(tokens)
        self._state.cursor = 0
        self._state.is_playing = False
        logger.debug("Loaded %d tokens (status=%s)", len(self._state.tokens), self.status.value)
        self._notify()

    def unload(self) -> None:
        """Discard the current text and return to IDLE."""
        self._disarm()
        self._state.tokens = ()
        self._state.cursor = 0
        self._state.is_playing = False
        logger.debug("Unloaded tokens")
        self._notify()

    def play(self) -> None:
        """Start advancing; replays from the beginning when at the last token."""
        state = self._state
        if not state.tokens or state.is_playing:
            return

        if state.cursor >= len(state.tokens) - 1:
            state.cursor = 0

        state.is_playing = True
        self._arm()
        logger.debug("Playing from %d at %d wpm", state.cursor, state.rate)
        self._notify()

    def pause(self) -> None:
        """Stop advancing. Idempotent."""
        if not self._state.is_playing:
            return

        self._stop()
        logger.debug("Paused at %d", self._state.cursor)
        self._notify()

    def toggle(self) -> None:
        """Play when paused, pause when playing."""
        if self._state.is_playing:
            self.pause()
        else:
            self.play()

    def step(self, direction: int) -> None:
        """
        Move the cursor by direction positions (normally -1 or +1).

        The cursor is clamped to the token range and the play state is left
        untouched.
        """
        state = self._state
        if not state.tokens:
            return

        cursor = clamp(state.cursor + direction, 0, len(state.tokens) - 1)
        if cursor == state.cursor:
            return

        state.cursor = cursor
        self._notify()

    def restart(self) -> None:
        """Rewind to the first token and stop."""
        state = self._state
        if not state.tokens:
            return

        self._disarm()
        state.cursor = 0
        state.is_playing = False
        self._notify()

    def set_rate(self, rate: int) -> None:
        """
        Set the playback rate, clamped into [min_rate, max_rate].

        While playing, the timer is disarmed and re-armed with the new
        period, so the next advance happens one new period from now.
        """
        clamped = clamp(int(rate), self._min_rate, self._max_rate)
        if clamped == self._state.rate:
            return

        self._state.rate = clamped
        if self._state.is_playing:
            self._arm()
            logger.debug("Re-armed timer at %d wpm", clamped)
        self._notify()

    def set_max_rate(self, max_rate: int) -> None:
        """Update the rate ceiling and re-clamp the current rate."""
        self._max_rate = max(self._min_rate, int(max_rate))
        if self._state.rate > self._max_rate:
            self.set_rate(self._max_rate)
        else:
            self._notify()

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _tick(self) -> None:
        state = self._state
        if not state.is_playing or not state.tokens:
            # Stale callback from a handle that was cancelled mid-dispatch
            self._disarm()
            return

        last = len(state.tokens) - 1
        state.cursor = min(state.cursor + 1, last)
        if state.cursor >= last:
            self._stop()
            logger.debug("Reached end of sequence at %d", state.cursor)
        self._notify()

    def _arm(self) -> None:
        self._disarm()
        self._handle = self._timer.arm(self.interval_ms, self._tick)

    def _disarm(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _stop(self) -> None:
        self._disarm()
        self._state.is_playing = False

    def _notify(self) -> None:
        if not self._listeners:
            return

        snapshot = self.snapshot()
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception:
                logger.exception("Playback listener %r failed", listener)
