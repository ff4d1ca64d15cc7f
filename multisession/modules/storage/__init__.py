"""
Storage Module - Black Box Interface

Purpose: Create and persist sessions
Interface: Store protocol, InMemoryStore, RedisStore, SessionSerializer, StorageModule
Hidden: Redis specifics, connection handling, serialization

Any object implementing Store can be handed to the registry or middleware.
"""

import os
from typing import Optional

import redis.asyncio as redis

from .base import BaseStore, Store
from .memory import InMemoryStore
from .redis_store import RedisStore
from .serializer import SessionSerializer


class StorageModule:
    """Owns the Redis connection used by RedisStore."""

    def __init__(self, connection_url: Optional[str] = None):
        """Initialize storage with connection URL."""
        self.url = connection_url or os.getenv("REDIS_URL", "redis://localhost:6379/0")
        self._client: Optional[redis.Redis] = None

    def connect(self) -> redis.Redis:
        """Get storage connection; the pool connects lazily on first command."""
        if not self._client:
            self._client = redis.from_url(self.url, decode_responses=True)
        return self._client

    async def disconnect(self) -> None:
        """Close storage connection."""
        if self._client:
            await self._client.aclose()
            self._client = None


__all__ = [
    "Store",
    "BaseStore",
    "InMemoryStore",
    "RedisStore",
    "SessionSerializer",
    "StorageModule",
]
