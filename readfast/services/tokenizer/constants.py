"""
Tokenizer and playback constants.

This module contains the rate bounds, presets and ORP length bands used by
the RSVP engine. Rate values here are engine defaults; the running
application reads its bounds from Settings and passes them in.
"""

import re

# Tokenizer version - increment when logic changes
TOKENIZER_VERSION = "1.0.0"

# Runs of Unicode whitespace separate tokens
WHITESPACE_PATTERN = re.compile(r"\s+", re.UNICODE)

# -----------------------------------------------------------------------------
# Playback Rate
# -----------------------------------------------------------------------------

MS_PER_MINUTE = 60_000

MIN_WPM = 100
MAX_WPM = 1000
DEFAULT_WPM = 300

# Increment applied by the rate up/down controls
WPM_STEP = 25

# (wpm, label) pairs offered as one-click speeds
WPM_PRESETS = (
    (200, "Beginner"),
    (250, "Average"),
    (300, "Fast"),
    (450, "Advanced"),
    (600, "Expert"),
)

# -----------------------------------------------------------------------------
# ORP Length Bands
# -----------------------------------------------------------------------------

# Upper bound (inclusive) of each word-length band
ORP_SINGLE_CHAR_MAX = 1
ORP_SHORT_WORD_MAX = 5
ORP_MEDIUM_WORD_MAX = 9
ORP_LONG_WORD_MAX = 13
