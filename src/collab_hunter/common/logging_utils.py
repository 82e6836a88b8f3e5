import logging
import os
from typing import Optional, Union

PathLike = Union[str, os.PathLike]

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s - %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def resolve_level(level: Union[int, str, None], default: int = logging.INFO) -> int:
    """
    Accept either a logging constant or a level name ("DEBUG", "warning", ...).
    Unknown names fall back to `default`.
    """
    if level is None:
        return default
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(str(level).strip().upper())
    return resolved if isinstance(resolved, int) else default


def configure_logging(
    level: Union[int, str] = logging.INFO,
    log_dir: Optional[PathLike] = None,
    logger_name: Optional[str] = None,
) -> logging.Logger:
    """
    Configure a root or named logger with console (and optional file) handlers.

    Call this once at application startup (the API lifespan does it).
    Other modules just call `get_logger(__name__)`.
    """
    logger = logging.getLogger(logger_name)
    logger.setLevel(resolve_level(level))

    # Avoid adding duplicate handlers if configure_logging is called multiple times
    if logger.handlers:
        return logger

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATE_FORMAT)

    stream_handler = logging.StreamHandler()
    stream_handler.setFormatter(formatter)
    logger.addHandler(stream_handler)

    if log_dir:
        log_dir_str = os.fspath(log_dir)
        os.makedirs(log_dir_str, exist_ok=True)
        log_path = os.path.join(log_dir_str, "collab_hunter.log")

        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    if logger_name:
        logger.propagate = False  # Avoid double logging to root
    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """
    Get a logger by name (or the root logger if name is None).
    Use this in modules instead of calling logging.getLogger directly.
    """
    return logging.getLogger(name)
