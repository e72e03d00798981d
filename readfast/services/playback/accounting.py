"""Derived display data for the reader view."""

from __future__ import annotations

from dataclasses import dataclass

from readfast.models.enums import PlaybackStatus
from readfast.services.tokenizer.orp import EMPTY_SPLIT, FocalSplit, ORPCalculator
from readfast.services.tokenizer.timing import estimate_reading_minutes
from readfast.services.playback.scheduler import PlaybackSnapshot


@dataclass(frozen=True)
class ReaderView:
    """Everything the presentation layer needs to draw one frame."""

    current_token: FocalSplit
    cursor: int
    total: int
    rate: int
    is_playing: bool
    status: PlaybackStatus
    progress_percent: int
    estimated_minutes: int
    can_go_back: bool
    can_go_forward: bool

    @property
    def position_label(self) -> str:
        if self.total == 0:
            return "0 / 0 words"
        return f"{self.cursor + 1} / {self.total} words"

    @property
    def summary_label(self) -> str:
        return f"{self.total} words • ~{self.estimated_minutes} min at {self.rate} wpm"


class SessionAccounting:
    """Compute progress, reading estimate and focal split from a snapshot."""

    def __init__(self, calculator: ORPCalculator | None = None) -> None:
        self._calculator = calculator or ORPCalculator()

    @staticmethod
    def progress_percent(cursor: int, total: int) -> int:
        if total <= 0:
            return 0
        # Half-up, matching Math.round in the browser client
        return (200 * (cursor + 1) + total) // (2 * total)

    def snapshot(self, state: PlaybackSnapshot) -> ReaderView:
        total = state.total
        token = state.current_token
        return ReaderView(
            current_token=self._calculator.split_for_display(token) if token else EMPTY_SPLIT,
            cursor=state.cursor,
            total=total,
            rate=state.rate,
            is_playing=state.is_playing,
            status=state.status,
            progress_percent=self.progress_percent(state.cursor, total),
            estimated_minutes=estimate_reading_minutes(total, state.rate),
            can_go_back=state.cursor > 0,
            can_go_forward=state.cursor < total - 1,
        )
