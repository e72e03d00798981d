"""Tests for subscription tiers and daily usage limits."""

from datetime import timedelta

import pytest

from readfast.config import Settings
from readfast.models.enums import SubscriptionTier
from readfast.services.entitlement import (
    SUBSCRIPTION_KEY,
    USAGE_KEY,
    Entitlements,
    free_limits,
    premium_limits,
)


@pytest.fixture
def entitlements(store, settings, clock):
    return Entitlements.from_settings(store, settings, clock=clock)


# =============================================================================
# Tiers
# =============================================================================


class TestTiers:
    def test_defaults_to_free(self, entitlements):
        assert not entitlements.is_premium
        assert entitlements.subscription.tier is SubscriptionTier.FREE
        assert entitlements.effective_max_rate == 400
        assert not entitlements.can_upload_files
        assert not entitlements.can_use_music

    def test_premium_unlocks_everything(self, entitlements, clock):
        sub = entitlements.activate_premium(customer_id="cus_123")

        assert entitlements.is_premium
        assert sub.expires_at == clock.now + timedelta(days=365)
        assert entitlements.effective_max_rate == 1000
        assert entitlements.can_upload_files
        assert entitlements.can_use_music

    def test_premium_expires(self, entitlements, clock):
        entitlements.activate_premium(duration_days=30, customer_id="cus_123")
        clock.now += timedelta(days=31)

        assert not entitlements.is_premium
        assert entitlements.effective_max_rate == 400
        # The customer id survives expiry for portal access
        assert entitlements.subscription.customer_id == "cus_123"

    def test_customer_id_preserved_on_renewal(self, entitlements):
        entitlements.activate_premium(customer_id="cus_123")
        sub = entitlements.activate_premium()
        assert sub.customer_id == "cus_123"

    def test_unreadable_subscription_is_free(self, store, entitlements):
        store.set(SUBSCRIPTION_KEY, {"tier": "platinum"})
        assert entitlements.subscription.tier is SubscriptionTier.FREE

    def test_limits_follow_settings(self):
        settings = Settings(_env_file=None, free_max_wpm=350, free_max_documents_per_day=7)
        assert free_limits(settings).max_wpm == 350
        assert free_limits(settings).max_documents_per_day == 7
        assert premium_limits(settings).max_documents_per_day is None


# =============================================================================
# Usage
# =============================================================================


class TestUsage:
    def test_fresh_usage_is_zero(self, entitlements, clock):
        usage = entitlements.usage
        assert usage.date == clock.now.date()
        assert (usage.words_read, usage.documents_read) == (0, 0)

    def test_record_reading_accumulates(self, entitlements):
        entitlements.record_reading(1200)
        usage = entitlements.record_reading(300)

        assert usage.words_read == 1500
        assert usage.documents_read == 2
        assert entitlements.usage == usage

    def test_usage_resets_on_new_day(self, entitlements, clock):
        entitlements.record_reading(1200)
        clock.now += timedelta(days=1)

        assert entitlements.usage.words_read == 0
        assert entitlements.usage.documents_read == 0

    def test_corrupt_usage_reads_zero(self, store, entitlements):
        store.set(USAGE_KEY, {"date": "yesterday-ish", "words_read": -5})
        assert entitlements.usage.words_read == 0


# =============================================================================
# Read Gate
# =============================================================================


class TestReadGate:
    def test_allowed_within_limits(self, entitlements):
        permission = entitlements.check_can_read_more()
        assert permission.allowed
        assert permission.reason is None

    def test_document_limit(self, entitlements):
        for _ in range(3):
            entitlements.record_reading(10)

        permission = entitlements.check_can_read_more()

        assert not permission.allowed
        assert permission.reason == (
            "You've reached your daily limit of 3 documents. "
            "Upgrade to Premium for unlimited reading."
        )

    def test_word_limit(self, entitlements):
        entitlements.record_reading(5000)

        permission = entitlements.check_can_read_more()

        assert not permission.allowed
        assert permission.reason == (
            "You've reached your daily limit of 5,000 words. "
            "Upgrade to Premium for unlimited reading."
        )

    def test_premium_always_allowed(self, entitlements):
        entitlements.activate_premium()
        for _ in range(10):
            entitlements.record_reading(10_000)
        assert entitlements.check_can_read_more().allowed

    def test_limit_lifts_next_day(self, entitlements, clock):
        for _ in range(3):
            entitlements.record_reading(10)
        clock.now += timedelta(days=1)
        assert entitlements.check_can_read_more().allowed


class TestRemainingUsage:
    def test_free_remaining(self, entitlements):
        entitlements.record_reading(1200)
        remaining = entitlements.remaining_usage()

        assert remaining.words_remaining == 3800
        assert remaining.documents_remaining == 2
        assert not remaining.is_premium

    def test_never_negative(self, entitlements):
        entitlements.record_reading(9000)
        assert entitlements.remaining_usage().words_remaining == 0

    def test_premium_unlimited(self, entitlements):
        entitlements.activate_premium()
        remaining = entitlements.remaining_usage()
        assert remaining.words_remaining is None
        assert remaining.documents_remaining is None
        assert remaining.is_premium
