"""Unified logger for the whole project."""

from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

from mirage.config.settings import settings

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
LOG_FILE_NAME = "mirage.log"
MAX_BYTES = 10 * 1024 * 1024
BACKUP_COUNT = 5

_LEVELS = {
    "CRITICAL": logging.CRITICAL,
    "ERROR": logging.ERROR,
    "WARNING": logging.WARNING,
    "WARN": logging.WARNING,
    "INFO": logging.INFO,
    "DEBUG": logging.DEBUG,
}


def resolve_level(raw: str) -> int:
    return _LEVELS.get(str(raw or "INFO").strip().upper(), logging.INFO)


def _file_handler(log_dir: Path, level: int, formatter: logging.Formatter) -> logging.Handler | None:
    try:
        log_dir.mkdir(parents=True, exist_ok=True)
        handler = RotatingFileHandler(
            log_dir / LOG_FILE_NAME,
            maxBytes=MAX_BYTES,
            backupCount=BACKUP_COUNT,
            encoding="utf-8",
        )
    except OSError:
        # 只读工作目录下退回 stderr
        return None
    handler.setLevel(level)
    handler.setFormatter(formatter)
    return handler


def _build_logger() -> logging.Logger:
    configured = logging.getLogger("mirage")
    if configured.handlers:
        return configured

    level = resolve_level(settings.log_level)
    formatter = logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT)
    configured.setLevel(level)

    stream_handler = logging.StreamHandler()
    stream_handler.setLevel(level)
    stream_handler.setFormatter(formatter)
    configured.addHandler(stream_handler)

    if settings.log_to_file:
        file_handler = _file_handler(Path(settings.log_dir), level, formatter)
        if file_handler is not None:
            configured.addHandler(file_handler)

    configured.propagate = False
    return configured


logger = _build_logger()


def get_logger(name: str) -> logging.Logger:
    """Return a child logger under the mirage namespace."""

    return logger.getChild(name)
