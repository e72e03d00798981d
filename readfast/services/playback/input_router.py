"""
Keyboard and control routing for the RSVP player.

InputRouter translates stimuli (key presses, button clicks) into scheduler
commands. Keyboard shortcuts are suppressed while focus is on a
text-entry surface so typing into a text box never drives playback.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Dict, Mapping, Optional

from readfast.models.enums import Stimulus
from readfast.services.tokenizer.constants import WPM_STEP
from readfast.services.playback.scheduler import PlaybackScheduler

logger = logging.getLogger(__name__)

# KeyboardEvent.code -> stimulus
DEFAULT_KEY_BINDINGS: Mapping[str, Stimulus] = {
    "Space": Stimulus.TOGGLE,
    "ArrowLeft": Stimulus.SEEK_BACKWARD,
    "ArrowRight": Stimulus.SEEK_FORWARD,
    "ArrowUp": Stimulus.RATE_UP,
    "ArrowDown": Stimulus.RATE_DOWN,
    "KeyR": Stimulus.RESTART,
}

FocusQuery = Callable[[], bool]


@dataclass
class KeyEvent:
    """A key press as delivered by the presentation layer.

    Attributes:
        code: Physical key code, e.g. "Space" or "ArrowLeft".
        target_is_text_entry: True when the event target is an input or
            textarea.
        default_prevented: Set by the router when it consumes the event.
    """

    code: str
    target_is_text_entry: bool = False
    default_prevented: bool = False

    def prevent_default(self) -> None:
        self.default_prevented = True


class InputRouter:
    """
    Route stimuli onto PlaybackScheduler commands.

    Args:
        scheduler: Scheduler receiving the commands. All clamping is left
            to the scheduler.
        rate_step: WPM change for the rate up/down stimuli.
        bindings: Key code to stimulus map.
        focus_query: Optional callable reporting whether a text-entry
            surface currently has focus.
    """

    def __init__(
        self,
        scheduler: PlaybackScheduler,
        *,
        rate_step: int = WPM_STEP,
        bindings: Optional[Mapping[str, Stimulus]] = None,
        focus_query: Optional[FocusQuery] = None,
    ) -> None:
        self._scheduler = scheduler
        self._rate_step = rate_step
        self._bindings: Dict[str, Stimulus] = dict(bindings or DEFAULT_KEY_BINDINGS)
        self._focus_query = focus_query

    @property
    def bindings(self) -> Mapping[str, Stimulus]:
        return dict(self._bindings)

    def is_text_entry_focused(self, event: Optional[KeyEvent] = None) -> bool:
        """Whether shortcuts must currently be suppressed."""
        if event is not None and event.target_is_text_entry:
            return True
        if self._focus_query is not None:
            return bool(self._focus_query())
        return False

    def handle_key(self, event: KeyEvent) -> bool:
        """
        Dispatch a key press.

        Returns:
            True when the key was bound and dispatched (its default action
            is then prevented), False when it was ignored.
        """
        if self.is_text_entry_focused(event):
            return False

        stimulus = self._bindings.get(event.code)
        if stimulus is None:
            return False

        event.prevent_default()
        self.dispatch(stimulus)
        return True

    def dispatch(self, stimulus: Stimulus) -> None:
        """Apply a stimulus to the scheduler. Used directly by UI controls."""
        scheduler = self._scheduler
        logger.debug("Dispatching %s", stimulus.value)

        if stimulus is Stimulus.TOGGLE:
            scheduler.toggle()
        elif stimulus is Stimulus.SEEK_BACKWARD:
            scheduler.step(-1)
        elif stimulus is Stimulus.SEEK_FORWARD:
            scheduler.step(1)
        elif stimulus is Stimulus.RATE_UP:
            scheduler.set_rate(scheduler.rate + self._rate_step)
        elif stimulus is Stimulus.RATE_DOWN:
            scheduler.set_rate(scheduler.rate - self._rate_step)
        elif stimulus is Stimulus.RESTART:
            scheduler.restart()
