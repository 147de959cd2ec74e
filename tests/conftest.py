"""
Shared pytest fixtures for the session cache tests.

This module provides common fixtures including:
- FakeClock: Deterministic, manually advanced time source
- StubVerifier: Remote verifier double that records its calls
- Redis mocks for the Redis-backed stores
"""

import fnmatch
import os
import sys
from datetime import UTC, datetime, timedelta
from typing import List, Optional, Tuple
from unittest.mock import AsyncMock

import pytest

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from rauth.modules.session.engine import SessionCacheEngine
from rauth.modules.session.store import RevokedSessionStore, SessionStore


# =============================================================================
# Time
# =============================================================================

class FakeClock:
    """Callable clock that only moves when told to."""

    def __init__(self, start: Optional[datetime] = None):
        self.now = start or datetime(2024, 1, 1, 12, 0, 0, tzinfo=UTC)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> datetime:
        self.now += timedelta(seconds=seconds)
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


# =============================================================================
# Remote verifier doubles
# =============================================================================

class StubVerifier:
    """
    Remote verifier double.

    Usage:
        verifier = StubVerifier(result=True)
        verifier = StubVerifier(error=RemoteUnavailable("down"))
    """

    def __init__(self, result: bool = True, error: Optional[Exception] = None, healthy: bool = True):
        self.result = result
        self.error = error
        self.healthy = healthy
        self.calls: List[Tuple[str, str]] = []
        self.health_calls = 0

    async def verify_session(self, session_token: str, user_phone: str) -> bool:
        self.calls.append((session_token, user_phone))
        if self.error is not None:
            raise self.error
        return self.result

    async def check_health(self) -> bool:
        self.health_calls += 1
        return self.healthy

    @property
    def call_count(self) -> int:
        return len(self.calls)


class ForbiddenVerifier:
    """Verifier that fails the test if the engine ever reaches the network."""

    async def verify_session(self, session_token: str, user_phone: str) -> bool:
        pytest.fail("remote verifier must not be called")

    async def check_health(self) -> bool:
        pytest.fail("remote verifier must not be called")


@pytest.fixture
def verifier():
    return StubVerifier(result=True)


@pytest.fixture
def session_store(clock):
    return SessionStore(clock=clock)


@pytest.fixture
def revoked_store(clock):
    return RevokedSessionStore(clock=clock)


@pytest.fixture
def engine(session_store, revoked_store, verifier, clock):
    """Engine with in-memory stores, a stub verifier and a fake clock."""
    return SessionCacheEngine(
        session_store,
        revoked_store,
        verifier,
        session_ttl=900,
        revoked_ttl=3600,
        clock=clock,
    )


# =============================================================================
# Redis Mocking Infrastructure
# =============================================================================

@pytest.fixture
def mock_redis_with_data():
    """
    Redis mock with in-memory data storage for more realistic tests.

    This allows testing code that reads back what it writes. TTLs passed to
    setex are recorded in ``_ttls`` but not enforced.
    """
    storage = {}
    ttls = {}

    redis = AsyncMock()

    async def mock_setex(key, ttl, value):
        storage[key] = value
        ttls[key] = ttl
        return True

    async def mock_get(key):
        return storage.get(key)

    async def mock_delete(*keys):
        count = 0
        for key in keys:
            if key in storage:
                del storage[key]
                ttls.pop(key, None)
                count += 1
        return count

    async def mock_scan_iter(match="*"):
        for key in list(storage.keys()):
            if fnmatch.fnmatch(key, match):
                yield key

    redis.setex = mock_setex
    redis.get = mock_get
    redis.delete = mock_delete
    redis.scan_iter = mock_scan_iter
    redis._storage = storage  # Expose for test assertions
    redis._ttls = ttls

    return redis


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "integration: Integration tests requiring infrastructure"
    )
