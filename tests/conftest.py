"""
Pytest configuration and fixtures for all tests
"""

from datetime import UTC, datetime

import pytest
from fastapi.testclient import TestClient

from readfast.config import Settings, get_settings, reset_settings
from readfast.main import create_app
from readfast.services.playback import ManualTimer, PlaybackScheduler
from readfast.services.storage import InMemoryStore


@pytest.fixture(autouse=True)
def reset_config():
    """Reset config singleton before each test to ensure clean state."""
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def settings():
    """Settings with defaults, isolated from any local .env file."""
    return Settings(_env_file=None)


@pytest.fixture
def timer():
    """Virtual-clock timer; nothing fires until advance() is called."""
    return ManualTimer()


@pytest.fixture
def scheduler(timer):
    """Scheduler with the standard 100-1000 wpm range at 300 wpm."""
    return PlaybackScheduler(timer, min_rate=100, max_rate=1000, rate=300)


@pytest.fixture
def store():
    return InMemoryStore()


class FakeClock:
    """Controllable clock for date- and expiry-dependent logic."""

    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture
def clock():
    return FakeClock(datetime(2026, 3, 14, 9, 30, tzinfo=UTC))


@pytest.fixture
def client(settings):
    """HTTP client against an app built from test settings."""
    app = create_app(settings)
    app.dependency_overrides[get_settings] = lambda: settings
    with TestClient(app) as test_client:
        yield test_client
