from typing import Optional

import redis.asyncio as redis

from .base import BaseStore, Payload


class RedisStore(BaseStore):
    """Session store backed by Redis; each session is one key with a TTL."""

    def __init__(self, redis_client: redis.Redis, key_prefix: str = "session:", **kwargs):
        """
        Initialize Redis store.

        Args:
            redis_client: Async Redis client
            key_prefix: Prefix for session keys
            **kwargs: Passed to BaseStore (options, serializer, default_ttl)
        """
        super().__init__(**kwargs)
        self.redis = redis_client
        self.key_prefix = key_prefix

    async def _load(self, session_id: str) -> Optional[Payload]:
        return await self.redis.get(self._build_key(session_id))

    async def _write(self, session_id: str, payload: str, ttl: int) -> None:
        await self.redis.setex(self._build_key(session_id), ttl, payload)

    async def _delete(self, session_id: str) -> None:
        await self.redis.delete(self._build_key(session_id))

    async def ping(self) -> bool:
        try:
            return bool(await self.redis.ping())
        except redis.RedisError:
            return False

    def _build_key(self, session_id: str) -> str:
        return f"{self.key_prefix}{session_id}"
