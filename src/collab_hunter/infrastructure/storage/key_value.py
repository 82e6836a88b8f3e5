"""
Storage media for the collection store.

A medium holds opaque string values under string keys. The store decides what
goes in them (one JSON envelope under one key).
"""
from __future__ import annotations

from typing import Dict, Optional

from typing_extensions import Protocol


class AsyncKeyValueStore(Protocol):
    async def get_item(self, key: str) -> Optional[str]:
        ...

    async def set_item(self, key: str, value: str) -> None:
        ...

    async def remove_item(self, key: str) -> None:
        ...


class SyncKeyValueStore(Protocol):
    """The legacy, synchronous medium. Only ever read once and then cleared."""

    def get_item(self, key: str) -> Optional[str]:
        ...

    def remove_item(self, key: str) -> None:
        ...


class InMemoryKeyValueStore:
    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        self._data: Dict[str, str] = dict(initial or {})

    async def get_item(self, key: str) -> Optional[str]:
        return self._data.get(key)

    async def set_item(self, key: str, value: str) -> None:
        self._data[key] = value

    async def remove_item(self, key: str) -> None:
        self._data.pop(key, None)


class InMemorySyncKeyValueStore:
    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        self._data: Dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._data[key] = value

    def remove_item(self, key: str) -> None:
        self._data.pop(key, None)
