"""
Runtime configuration.

Everything is read from environment variables (a local `.env` is loaded first),
the same way the LLM and storage clients pick up their keys and URLs.
"""
from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Callable, Literal, Optional

from dotenv import load_dotenv

StorageBackend = Literal["file", "redis", "memory"]

DEFAULT_MODEL = "gpt-4.1"
DEFAULT_STORAGE_DIR = os.path.join(os.path.expanduser("~"), ".collab_hunter")


def _env(name: str, cast_fn: Callable[[str], Any], default: Any) -> Any:
    """Best-effort parse of an env var; malformed values fall back to `default`."""
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return cast_fn(raw)
    except (TypeError, ValueError):
        return default


@dataclass(frozen=True)
class Settings:
    openai_api_key: Optional[str] = None
    model_name: str = DEFAULT_MODEL
    temperature: float = 0.1
    max_attempts: int = 3
    retry_base_delay: float = 1.0
    storage_backend: StorageBackend = "file"
    storage_dir: str = DEFAULT_STORAGE_DIR
    legacy_store_path: Optional[str] = None
    redis_url: str = "redis://localhost:6379/0"
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        load_dotenv()

        backend = (os.getenv("COLLAB_HUNTER_STORAGE_BACKEND") or "file").strip().lower()
        if backend not in ("file", "redis", "memory"):
            backend = "file"

        return cls(
            openai_api_key=os.getenv("OPENAI_API_KEY"),
            model_name=os.getenv("COLLAB_HUNTER_MODEL", DEFAULT_MODEL),
            temperature=_env("COLLAB_HUNTER_TEMPERATURE", float, 0.1),
            max_attempts=max(1, _env("COLLAB_HUNTER_MAX_ATTEMPTS", int, 3)),
            retry_base_delay=max(0.0, _env("COLLAB_HUNTER_RETRY_BASE_DELAY", float, 1.0)),
            storage_backend=backend,  # type: ignore[arg-type]
            storage_dir=os.getenv("COLLAB_HUNTER_STORAGE_DIR", DEFAULT_STORAGE_DIR),
            legacy_store_path=os.getenv("COLLAB_HUNTER_LEGACY_STORE_PATH"),
            redis_url=os.getenv("REDIS_URL", "redis://localhost:6379/0"),
            log_level=os.getenv("COLLAB_HUNTER_LOG_LEVEL", "INFO"),
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings.from_env()
