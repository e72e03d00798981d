"""Domain enums for ReadFast."""

from readfast.models.enums import PlaybackStatus, SourceType, Stimulus, SubscriptionTier

__all__ = [
    "PlaybackStatus",
    "SourceType",
    "Stimulus",
    "SubscriptionTier",
]
