"""
Tokenizer package for RSVP text processing.

This package contains modules for turning text into playable tokens:
- tokenizer: whitespace tokenizer (primary entry point)
- orp: Optimal Recognition Point calculator and focal splits
- timing: interval and reading-time calculations
- constants: rate bounds, presets and ORP length bands

Primary usage:
    >>> from readfast.services.tokenizer import tokenize, focal_split
    >>> tokens = tokenize("Hello world.")
    >>> focal_split(tokens[0])
    FocalSplit(prefix='He', focal='l', suffix='lo')
"""

from .tokenizer import count_words, tokenize
from .orp import EMPTY_SPLIT, FocalSplit, ORPCalculator, focal_split, orp_index
from .timing import calculate_interval_ms, estimate_reading_minutes
from .constants import (
    DEFAULT_WPM,
    MAX_WPM,
    MIN_WPM,
    MS_PER_MINUTE,
    TOKENIZER_VERSION,
    WPM_PRESETS,
    WPM_STEP,
)


def get_tokenizer_version() -> str:
    """Return the current tokenizer version string."""
    return TOKENIZER_VERSION


__all__ = [
    # Tokenizer
    "tokenize",
    "count_words",
    "get_tokenizer_version",
    # ORP
    "ORPCalculator",
    "FocalSplit",
    "EMPTY_SPLIT",
    "orp_index",
    "focal_split",
    # Timing
    "calculate_interval_ms",
    "estimate_reading_minutes",
    # Constants
    "TOKENIZER_VERSION",
    "MS_PER_MINUTE",
    "MIN_WPM",
    "MAX_WPM",
    "DEFAULT_WPM",
    "WPM_STEP",
    "WPM_PRESETS",
]
