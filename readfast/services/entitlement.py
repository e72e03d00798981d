"""
Subscription tiers, daily usage limits and the read gate.

Entitlements is an explicit context object: it is handed to the reader
session instead of being looked up globally, and all of its state lives in
the injected KeyValueStore.
"""

from __future__ import annotations

import logging
import datetime as dt
from typing import Optional

from pydantic import BaseModel, Field, ValidationError

from readfast.config import Settings, get_settings
from readfast.models.enums import SubscriptionTier
from readfast.services.storage import Clock, KeyValueStore, StorageError, utc_now

logger = logging.getLogger(__name__)

USAGE_KEY = "readfast_usage"
SUBSCRIPTION_KEY = "readfast_subscription"


class TierLimits(BaseModel):
    """Limits for one subscription tier. None means unlimited."""

    max_words_per_day: Optional[int] = None
    max_documents_per_day: Optional[int] = None
    max_wpm: int
    allow_file_upload: bool
    allow_music: bool


class SubscriptionState(BaseModel):
    tier: SubscriptionTier = SubscriptionTier.FREE
    expires_at: Optional[dt.datetime] = None
    customer_id: Optional[str] = None


class UsageData(BaseModel):
    date: dt.date
    words_read: int = Field(0, ge=0)
    documents_read: int = Field(0, ge=0)


class ReadPermission(BaseModel):
    allowed: bool
    reason: Optional[str] = None


class RemainingUsage(BaseModel):
    words_remaining: Optional[int]
    documents_remaining: Optional[int]
    is_premium: bool


def free_limits(settings: Settings) -> TierLimits:
    return TierLimits(
        max_words_per_day=settings.free_max_words_per_day,
        max_documents_per_day=settings.free_max_documents_per_day,
        max_wpm=settings.free_max_wpm,
        allow_file_upload=False,
        allow_music=False,
    )


def premium_limits(settings: Settings) -> TierLimits:
    return TierLimits(
        max_wpm=settings.max_wpm,
        allow_file_upload=True,
        allow_music=True,
    )


class Entitlements:
    """
    Decide what the current user may do.

    Args:
        store: Where subscription and usage records live.
        free: Limits applied to the free tier.
        premium: Limits applied to the premium tier.
        clock: Returns the current aware datetime; drives daily resets and
            subscription expiry.
        premium_duration_days: Default length of a premium activation.
    """

    def __init__(
        self,
        store: KeyValueStore,
        *,
        free: TierLimits,
        premium: TierLimits,
        clock: Clock = utc_now,
        premium_duration_days: int = 365,
    ) -> None:
        self._store = store
        self._free = free
        self._premium = premium
        self._clock = clock
        self.premium_duration_days = premium_duration_days

    @classmethod
    def from_settings(
        cls,
        store: KeyValueStore,
        settings: Optional[Settings] = None,
        clock: Clock = utc_now,
    ) -> "Entitlements":
        settings = settings or get_settings()
        return cls(
            store,
            free=free_limits(settings),
            premium=premium_limits(settings),
            clock=clock,
            premium_duration_days=settings.premium_duration_days,
        )

    # -------------------------------------------------------------------------
    # Subscription
    # -------------------------------------------------------------------------

    @property
    def subscription(self) -> SubscriptionState:
        raw = self._store.get(SUBSCRIPTION_KEY)
        if not raw:
            return SubscriptionState()
        try:
            sub = SubscriptionState.model_validate(raw)
        except ValidationError:
            logger.warning("Ignoring unreadable subscription record")
            return SubscriptionState()

        if (
            sub.tier is SubscriptionTier.PREMIUM
            and sub.expires_at is not None
            and sub.expires_at < self._clock()
        ):
            return SubscriptionState(customer_id=sub.customer_id)
        return sub

    @property
    def is_premium(self) -> bool:
        return self.subscription.tier is SubscriptionTier.PREMIUM

    @property
    def limits(self) -> TierLimits:
        return self._premium if self.is_premium else self._free

    @property
    def effective_max_rate(self) -> int:
        return self.limits.max_wpm

    @property
    def can_upload_files(self) -> bool:
        return self.limits.allow_file_upload

    @property
    def can_use_music(self) -> bool:
        return self.limits.allow_music

    def set_subscription(
        self,
        tier: SubscriptionTier,
        expires_at: Optional[dt.datetime] = None,
        customer_id: Optional[str] = None,
    ) -> SubscriptionState:
        """Store a subscription, keeping a previously known customer id."""
        sub = SubscriptionState(
            tier=tier,
            expires_at=expires_at,
            customer_id=customer_id or self.subscription.customer_id,
        )
        self._store.set(SUBSCRIPTION_KEY, sub.model_dump(mode="json"))
        logger.info("Subscription set to %s", tier.value)
        return sub

    def activate_premium(
        self,
        duration_days: Optional[int] = None,
        customer_id: Optional[str] = None,
    ) -> SubscriptionState:
        days = duration_days or self.premium_duration_days
        return self.set_subscription(
            SubscriptionTier.PREMIUM,
            expires_at=self._clock() + dt.timedelta(days=days),
            customer_id=customer_id,
        )

    # -------------------------------------------------------------------------
    # Usage
    # -------------------------------------------------------------------------

    def _today(self) -> dt.date:
        return self._clock().date()

    @property
    def usage(self) -> UsageData:
        """Today's usage; counters reset when the stored day is not today."""
        today = self._today()
        raw = self._store.get(USAGE_KEY)
        if not raw:
            return UsageData(date=today)
        try:
            usage = UsageData.model_validate(raw)
        except ValidationError:
            logger.warning("Ignoring unreadable usage record")
            return UsageData(date=today)

        if usage.date != today:
            return UsageData(date=today)
        return usage

    def record_reading(self, word_count: int) -> UsageData:
        """Count one more document of word_count words against today."""
        current = self.usage
        updated = UsageData(
            date=current.date,
            words_read=current.words_read + max(0, word_count),
            documents_read=current.documents_read + 1,
        )
        try:
            self._store.set(USAGE_KEY, updated.model_dump(mode="json"))
        except StorageError:
            logger.warning("Could not persist usage counters")
        return updated

    def check_can_read_more(self) -> ReadPermission:
        if self.is_premium:
            return ReadPermission(allowed=True)

        usage = self.usage
        limits = self._free

        if (
            limits.max_documents_per_day is not None
            and usage.documents_read >= limits.max_documents_per_day
        ):
            return ReadPermission(
                allowed=False,
                reason=(
                    f"You've reached your daily limit of {limits.max_documents_per_day} "
                    "documents. Upgrade to Premium for unlimited reading."
                ),
            )

        if (
            limits.max_words_per_day is not None
            and usage.words_read >= limits.max_words_per_day
        ):
            return ReadPermission(
                allowed=False,
                reason=(
                    f"You've reached your daily limit of {limits.max_words_per_day:,} "
                    "words. Upgrade to Premium for unlimited reading."
                ),
            )

        return ReadPermission(allowed=True)

    def remaining_usage(self) -> RemainingUsage:
        if self.is_premium:
            return RemainingUsage(
                words_remaining=None,
                documents_remaining=None,
                is_premium=True,
            )

        usage = self.usage
        limits = self._free
        return RemainingUsage(
            words_remaining=(
                None
                if limits.max_words_per_day is None
                else max(0, limits.max_words_per_day - usage.words_read)
            ),
            documents_remaining=(
                None
                if limits.max_documents_per_day is None
                else max(0, limits.max_documents_per_day - usage.documents_read)
            ),
            is_premium=False,
        )
