"""Logging setup shared by the pcapcodec library and its CLI."""

from __future__ import annotations

import logging
import os

ROOT_LOGGER_NAME = "pcapcodec"
DEFAULT_LOG_LEVEL = logging.WARNING
ENV_LOG_LEVEL = "PCAPCODEC_LOG_LEVEL"
LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def _level_from_env(default: int) -> int:
    raw = os.getenv(ENV_LOG_LEVEL)
    if not raw:
        return default
    level = logging.getLevelName(raw.strip().upper())
    return level if isinstance(level, int) else default


def configure_logging(verbose: bool = False) -> None:
    """Configure root logging for the CLI.

    ``--verbose`` wins over ``PCAPCODEC_LOG_LEVEL``; library code never calls this.
    """

    level = logging.DEBUG if verbose else _level_from_env(DEFAULT_LOG_LEVEL)
    logging.basicConfig(level=level, format=LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")


def get_logger(name: str | None = None) -> logging.Logger:
    return logging.getLogger(name if name else ROOT_LOGGER_NAME)


__all__ = ["configure_logging", "get_logger"]
