from typing import Optional

from collab_hunter.common.config import Settings, get_settings
from collab_hunter.common.logging_utils import get_logger
from collab_hunter.infrastructure.storage.file_store import FileKeyValueStore, LegacyJsonFileStore
from collab_hunter.infrastructure.storage.key_value import AsyncKeyValueStore, InMemoryKeyValueStore
from collab_hunter.infrastructure.storage.redis.client import RedisKeyValueStore, get_redis_client
from collab_hunter.notebooks.store import CollectionStore

logger = get_logger(__name__)


async def build_primary_store(settings: Optional[Settings] = None) -> AsyncKeyValueStore:
    settings = settings or get_settings()
    backend = settings.storage_backend

    if backend == "redis":
        logger.info("Using Redis collection storage")
        return RedisKeyValueStore(await get_redis_client(settings.redis_url))
    if backend == "memory":
        logger.info("Using in-memory collection storage (nothing survives a restart)")
        return InMemoryKeyValueStore()

    logger.info(f"Using file collection storage in {settings.storage_dir}")
    return FileKeyValueStore(settings.storage_dir)


def build_legacy_store(settings: Optional[Settings] = None) -> Optional[LegacyJsonFileStore]:
    settings = settings or get_settings()
    if not settings.legacy_store_path:
        return None
    return LegacyJsonFileStore(settings.legacy_store_path)


async def open_collection_store(settings: Optional[Settings] = None) -> CollectionStore:
    """Build the configured media, then load (and migrate) the collection store."""
    settings = settings or get_settings()
    store = CollectionStore(await build_primary_store(settings), build_legacy_store(settings))
    await store.load()
    return store
