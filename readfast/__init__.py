"""ReadFast: RSVP speed-reading engine."""

__version__ = "0.1.0"
