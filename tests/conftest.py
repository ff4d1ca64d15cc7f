"""
Shared pytest fixtures for multisession tests.

This module provides common fixtures including:
- FakeStore: Store double recording new/save calls with injectable failures
- Request context and Redis mocks
"""

from typing import List, Optional
from unittest.mock import AsyncMock

import pytest

from multisession.modules.registry import RequestContext
from multisession.modules.session import new_session


class FakeStore:
    """
    Store double for registry and middleware tests.

    Usage:
        def test_failing_save(registry):
            store = FakeStore(save_error=RuntimeError("disk full"))
            session, _ = await registry.get(store, "prefs")
            errors = await registry.save(registry.context)
    """

    def __init__(
        self,
        new_error: Optional[Exception] = None,
        save_error: Optional[Exception] = None,
    ):
        self.new_error = new_error
        self.save_error = save_error
        self.new_calls: List[str] = []
        self.saved: List[str] = []

    async def new(self, context, name):
        self.new_calls.append(name)
        session = new_session(self, name)
        session.is_new = True
        return session, self.new_error

    async def save(self, context, session):
        self.saved.append(session.name)
        if self.save_error is not None:
            raise self.save_error


@pytest.fixture
def fake_store():
    """A store that always succeeds."""
    return FakeStore()


@pytest.fixture
def context():
    """A request context without an HTTP request behind it."""
    return RequestContext()


@pytest.fixture
def mock_redis():
    """Create a mock Redis client."""
    redis = AsyncMock()
    redis.get = AsyncMock(return_value=None)
    redis.setex = AsyncMock()
    redis.delete = AsyncMock()
    redis.ping = AsyncMock(return_value=True)
    return redis
