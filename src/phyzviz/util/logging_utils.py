"""Shared logging helpers."""

from __future__ import annotations

import logging
import os
from typing import Final

_LOG_FORMAT: Final[str] = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def _parse_level(level_str: str | None, default: int) -> int:
    if not level_str:
        return default
    level_str = level_str.strip().upper()
    mapping = {
        "CRITICAL": logging.CRITICAL,
        "ERROR": logging.ERROR,
        "WARNING": logging.WARNING,
        "WARN": logging.WARNING,
        "INFO": logging.INFO,
        "DEBUG": logging.DEBUG,
    }
    return mapping.get(level_str, default)


def get_logger(name: str, level: int | None = None) -> logging.Logger:
    """Return a logger that emits to stderr.

    An explicit `level` wins; otherwise the `LOG_LEVEL` environment variable
    is used, falling back to INFO. Handlers are attached once per logger.
    """
    chosen_level = level if level is not None else _parse_level(os.environ.get("LOG_LEVEL"), logging.INFO)

    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(_LOG_FORMAT))
        logger.addHandler(handler)
    logger.setLevel(chosen_level)
    return logger
