# common/artifacts.py

import os
from datetime import datetime
from typing import Union

import aiofiles
import aiofiles.os

from collab_hunter.common.logging_utils import get_logger

PathLike = Union[str, os.PathLike]

logger = get_logger(__name__)


def sanitize_filename(filename: str) -> str:
    """
    Make a collection name safe to use as a file name.

    Windows doesn't allow: < > : " / \\ | ? *
    CJK characters are kept as-is.
    """
    for char in '<>:"/\\|?*':
        filename = filename.replace(char, "_")
    filename = "".join(ch for ch in filename if ord(ch) >= 0x20)

    # Windows doesn't allow leading/trailing dots and spaces
    filename = filename.strip(". ")

    while "__" in filename:
        filename = filename.replace("__", "_")
    return filename or "untitled"


def export_filename(name: str, extension: str, suffix: str = "") -> str:
    stem = sanitize_filename(name)
    if suffix:
        stem += f"_{suffix}"
    return f"{stem}.{extension}"


async def ensure_directory_exists(path: PathLike) -> None:
    """
    Ensure a directory exists, creating it if necessary.

    `path` can be either a directory path or a full file path.
    If it's a file path, we use its parent directory.
    """
    path_str = os.fspath(path)
    dir_path = path_str if os.path.isdir(path_str) else os.path.dirname(path_str)

    if not dir_path:
        return

    await aiofiles.os.makedirs(dir_path, exist_ok=True)


async def save_text_artifact(content: str, filepath: PathLike) -> str:
    """
    Write `content` to `filepath` (UTF-8), creating parent directories.

    Returns the path written. I/O errors propagate.
    """
    filepath = os.fspath(filepath)
    await ensure_directory_exists(filepath)

    async with aiofiles.open(filepath, "w", encoding="utf-8") as f:
        await f.write(content)
    logger.debug(f"Saved text artifact: {filepath}")
    return filepath


def get_current_date_string() -> str:
    """Returns a clean, human-readable date string for export headers."""
    return datetime.now().strftime("%Y-%m-%d")
