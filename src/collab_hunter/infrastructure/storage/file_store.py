"""File-backed media: one file per key under a directory (async), and the legacy single JSON file (sync)."""
from __future__ import annotations

import json
import os
from typing import Dict, Optional

import aiofiles
import aiofiles.os

from collab_hunter.common.artifacts import ensure_directory_exists, sanitize_filename
from collab_hunter.common.logging_utils import get_logger

logger = get_logger(__name__)


class FileKeyValueStore:
    """
    AsyncKeyValueStore backed by `<base_dir>/<key>.json`.

    Writes go to a temp file that is then renamed over the target.
    """

    def __init__(self, base_dir: str) -> None:
        self.base_dir = os.fspath(base_dir)

    def path_for(self, key: str) -> str:
        return os.path.join(self.base_dir, f"{sanitize_filename(key)}.json")

    async def get_item(self, key: str) -> Optional[str]:
        path = self.path_for(key)
        if not await aiofiles.os.path.exists(path):
            return None
        async with aiofiles.open(path, "r", encoding="utf-8") as f:
            return await f.read()

    async def set_item(self, key: str, value: str) -> None:
        path = self.path_for(key)
        tmp_path = f"{path}.tmp"
        await ensure_directory_exists(path)
        async with aiofiles.open(tmp_path, "w", encoding="utf-8") as f:
            await f.write(value)
        await aiofiles.os.replace(tmp_path, path)

    async def remove_item(self, key: str) -> None:
        path = self.path_for(key)
        if await aiofiles.os.path.exists(path):
            await aiofiles.os.remove(path)


class LegacyJsonFileStore:
    """
    SyncKeyValueStore over one JSON object file ({key: value, ...}).

    This is where earlier versions kept their data. It is only read during the
    one-time migration.
    """

    def __init__(self, path: str) -> None:
        self.path = os.fspath(path)

    def _read_all(self) -> Dict[str, str]:
        if not os.path.exists(self.path):
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning(f"Legacy store {self.path} is unreadable: {e}")
            return {}
        if not isinstance(data, dict):
            logger.warning(f"Legacy store {self.path} does not hold a JSON object; ignoring it")
            return {}
        return {k: v if isinstance(v, str) else json.dumps(v, ensure_ascii=False) for k, v in data.items()}

    def _write_all(self, data: Dict[str, str]) -> None:
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(data, f, ensure_ascii=False, indent=2)

    def get_item(self, key: str) -> Optional[str]:
        return self._read_all().get(key)

    def set_item(self, key: str, value: str) -> None:
        data = self._read_all()
        data[key] = value
        directory = os.path.dirname(self.path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        self._write_all(data)

    def remove_item(self, key: str) -> None:
        data = self._read_all()
        if key not in data:
            return
        del data[key]
        if data:
            self._write_all(data)
        else:
            os.remove(self.path)
