"""
Redis client and the Redis-backed key-value medium.
"""
from typing import Optional

import redis.asyncio as redis

from collab_hunter.common.config import get_settings

KEY_PREFIX = "collab_hunter:"

_redis_client: Optional[redis.Redis] = None


async def get_redis_client(url: Optional[str] = None) -> redis.Redis:
    """Get or create Redis client."""
    global _redis_client
    if _redis_client is None:
        _redis_client = redis.from_url(url or get_settings().redis_url, decode_responses=True)
    return _redis_client


async def close_redis_client() -> None:
    global _redis_client
    if _redis_client:
        await _redis_client.aclose()
        _redis_client = None


class RedisKeyValueStore:
    """AsyncKeyValueStore over plain Redis string keys (namespaced with KEY_PREFIX)."""

    def __init__(self, client: redis.Redis, prefix: str = KEY_PREFIX) -> None:
        self.client = client
        self.prefix = prefix

    def _key(self, key: str) -> str:
        return f"{self.prefix}{key}"

    async def get_item(self, key: str) -> Optional[str]:
        value = await self.client.get(self._key(key))
        if isinstance(value, bytes):
            return value.decode("utf-8")
        return value

    async def set_item(self, key: str, value: str) -> None:
        await self.client.set(self._key(key), value)

    async def remove_item(self, key: str) -> None:
        await self.client.delete(self._key(key))
