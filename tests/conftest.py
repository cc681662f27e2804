"""Root test fixtures shared across all test types.

This conftest contains fixtures that can be used by both unit and integration tests.
Database-specific fixtures are in tests/integration/conftest.py.
"""

import os

# Environment must be set before any app imports read settings
os.environ.setdefault("APP_ENV", "testing")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("DATABASE_SSL_MODE", "disable")
os.environ.setdefault("EXPIRATION_SCHEDULE", "")

# ruff: noqa: E402 - Imports must be after env var setup
from collections.abc import Generator
from uuid import uuid7

import pytest

from src.app.core.actor import Actor
from src.app.core.config import get_settings
from src.app.core.shutdown import request_tracker

# Clear settings cache to ensure test environment variables are picked up
get_settings.cache_clear()


@pytest.fixture
def actor() -> Actor:
    """A regular project member."""
    return Actor(id=uuid7(), name="Test User", role="member")


@pytest.fixture
def manager() -> Actor:
    """An actor whose role auto-activates new projects."""
    return Actor(id=uuid7(), name="Test Manager", role="manager")


@pytest.fixture
def actor_headers(actor: Actor) -> dict[str, str]:
    return {"X-Actor-Id": str(actor.id), "X-Actor-Name": actor.name, "X-Actor-Role": "member"}


@pytest.fixture
def manager_headers(manager: Actor) -> dict[str, str]:
    return {
        "X-Actor-Id": str(manager.id),
        "X-Actor-Name": manager.name,
        "X-Actor-Role": "Manager",
    }


@pytest.fixture(autouse=True)
def _reset_request_tracker() -> Generator[None]:
    """Keep graceful-shutdown state from leaking between tests."""
    request_tracker.reset()
    yield
    request_tracker.reset()
