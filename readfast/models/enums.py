"""Enums shared across the engine, collaborators and API."""

from enum import Enum


class SourceType(str, Enum):
    """Enum for document source types."""

    PASTE = "paste"
    URL = "url"
    PDF = "pdf"
    EPUB = "epub"
    TEXT = "txt"
    MARKDOWN = "md"


class PlaybackStatus(str, Enum):
    """Lifecycle state of the playback scheduler."""

    IDLE = "idle"
    READY = "ready"
    PLAYING = "playing"


class SubscriptionTier(str, Enum):
    """Enum for subscription tiers."""

    FREE = "free"
    PREMIUM = "premium"


class Stimulus(str, Enum):
    """Transport commands the input router can dispatch.

    Each member corresponds to one keyboard shortcut or UI control.
    """

    TOGGLE = "toggle"
    SEEK_BACKWARD = "seek_backward"
    SEEK_FORWARD = "seek_forward"
    RATE_UP = "rate_up"
    RATE_DOWN = "rate_down"
    RESTART = "restart"
