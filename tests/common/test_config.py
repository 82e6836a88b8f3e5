"""
Tests for environment-driven settings and logging setup.
"""
import logging

import pytest

from collab_hunter.common import config as config_module
from collab_hunter.common.config import DEFAULT_MODEL, Settings
from collab_hunter.common.logging_utils import configure_logging, resolve_level

ENV_VARS = [
    "OPENAI_API_KEY",
    "COLLAB_HUNTER_MODEL",
    "COLLAB_HUNTER_TEMPERATURE",
    "COLLAB_HUNTER_MAX_ATTEMPTS",
    "COLLAB_HUNTER_RETRY_BASE_DELAY",
    "COLLAB_HUNTER_STORAGE_BACKEND",
    "COLLAB_HUNTER_STORAGE_DIR",
    "COLLAB_HUNTER_LEGACY_STORE_PATH",
    "COLLAB_HUNTER_LOG_LEVEL",
    "REDIS_URL",
]


@pytest.fixture
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr(config_module, "load_dotenv", lambda: False)
    return monkeypatch


class TestSettings:
    def test_defaults(self, clean_env):
        settings = Settings.from_env()
        assert settings.model_name == DEFAULT_MODEL
        assert settings.max_attempts == 3
        assert settings.retry_base_delay == 1.0
        assert settings.storage_backend == "file"
        assert settings.legacy_store_path is None

    def test_values_from_env(self, clean_env):
        clean_env.setenv("COLLAB_HUNTER_MAX_ATTEMPTS", "5")
        clean_env.setenv("COLLAB_HUNTER_TEMPERATURE", "0.7")
        clean_env.setenv("COLLAB_HUNTER_STORAGE_BACKEND", " Redis ")
        clean_env.setenv("REDIS_URL", "redis://cache:6379/2")

        settings = Settings.from_env()
        assert settings.max_attempts == 5
        assert settings.temperature == 0.7
        assert settings.storage_backend == "redis"
        assert settings.redis_url == "redis://cache:6379/2"

    def test_malformed_values_fall_back(self, clean_env):
        clean_env.setenv("COLLAB_HUNTER_MAX_ATTEMPTS", "three")
        clean_env.setenv("COLLAB_HUNTER_RETRY_BASE_DELAY", "")
        clean_env.setenv("COLLAB_HUNTER_STORAGE_BACKEND", "s3")

        settings = Settings.from_env()
        assert settings.max_attempts == 3
        assert settings.retry_base_delay == 1.0
        assert settings.storage_backend == "file"

    def test_attempts_never_below_one(self, clean_env):
        clean_env.setenv("COLLAB_HUNTER_MAX_ATTEMPTS", "0")
        assert Settings.from_env().max_attempts == 1


class TestLogging:
    @pytest.mark.parametrize(
        "level, expected",
        [("debug", logging.DEBUG), ("WARNING", logging.WARNING), (logging.ERROR, logging.ERROR), ("loud", logging.INFO), (None, logging.INFO)],
    )
    def test_resolve_level(self, level, expected):
        assert resolve_level(level) == expected

    def test_configure_is_idempotent(self, tmp_path):
        name = "collab_hunter.tests.configure"
        logger = configure_logging("DEBUG", log_dir=tmp_path, logger_name=name)
        again = configure_logging("INFO", log_dir=tmp_path, logger_name=name)

        assert again is logger
        assert len(logger.handlers) == 2
        assert logger.level == logging.INFO
        assert not logger.propagate
        assert (tmp_path / "collab_hunter.log").exists()

        for handler in list(logger.handlers):
            handler.close()
            logger.removeHandler(handler)
