"""Business logic services for ReadFast."""

from readfast.services.tokenizer import ORPCalculator, FocalSplit, tokenize, orp_index
from readfast.services.playback import (
    InputRouter,
    PlaybackScheduler,
    ReaderSession,
    SessionAccounting,
)

__all__ = [
    # Core engine
    "tokenize",
    "orp_index",
    "ORPCalculator",
    "FocalSplit",
    "PlaybackScheduler",
    "InputRouter",
    "SessionAccounting",
    # Facade
    "ReaderSession",
]
