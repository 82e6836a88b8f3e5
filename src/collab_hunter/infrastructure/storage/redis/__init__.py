"""Redis client and utilities."""

from .client import KEY_PREFIX, RedisKeyValueStore, close_redis_client, get_redis_client

__all__ = [
    "get_redis_client",
    "close_redis_client",
    "RedisKeyValueStore",
    "KEY_PREFIX",
]
