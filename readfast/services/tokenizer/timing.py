"""
Timing calculations for RSVP reading.

The playback interval is derived directly from the WPM setting; every
word is shown for the same duration.
"""

import math

from readfast.services.tokenizer.constants import MS_PER_MINUTE


def calculate_interval_ms(wpm: int) -> float:
    """
    Calculate the word display interval from WPM (words per minute).

    Args:
        wpm: Target reading speed in words per minute.

    Returns:
        Interval in milliseconds between word advances.

    Raises:
        ValueError: If wpm is not positive.

    Examples:
        >>> calculate_interval_ms(300)
        200.0
        >>> calculate_interval_ms(600)
        100.0
    """
    if wpm <= 0:
        raise ValueError(f"WPM must be positive, got {wpm}")

    return MS_PER_MINUTE / wpm


def estimate_reading_minutes(word_count: int, wpm: int) -> int:
    """
    Estimate reading time for a whole document, rounded up to minutes.

    The estimate always covers the full word count, not the words left
    after the current position.

    Examples:
        >>> estimate_reading_minutes(1500, 300)
        5
        >>> estimate_reading_minutes(301, 300)
        2
    """
    if word_count <= 0:
        return 0
    if wpm <= 0:
        raise ValueError(f"WPM must be positive, got {wpm}")

    return math.ceil(word_count / wpm)
