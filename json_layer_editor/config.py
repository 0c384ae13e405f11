"""Defaults and environment overrides."""
from __future__ import annotations

import logging
import os

logger = logging.getLogger(__name__)

DEFAULT_MAX_DEPTH = 10
DEFAULT_INDENT = 2
DEFAULT_LOG_LEVEL = "INFO"

MAX_DEPTH_ENV = "JSON_LAYER_EDITOR_MAX_DEPTH"
LOG_LEVEL_ENV = "JSON_LAYER_EDITOR_LOG_LEVEL"

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def get_max_depth() -> int:
    raw = os.environ.get(MAX_DEPTH_ENV)
    if raw is None or not raw.strip():
        return DEFAULT_MAX_DEPTH
    try:
        value = int(raw)
    except ValueError:
        logger.warning("Ignoring %s=%r: not an integer", MAX_DEPTH_ENV, raw)
        return DEFAULT_MAX_DEPTH
    if value < 0:
        logger.warning("Ignoring %s=%r: must be >= 0", MAX_DEPTH_ENV, raw)
        return DEFAULT_MAX_DEPTH
    return value


def get_log_level() -> int:
    name = os.environ.get(LOG_LEVEL_ENV, DEFAULT_LOG_LEVEL).strip().upper()
    level = logging.getLevelName(name)
    if not isinstance(level, int):
        logger.warning("Ignoring %s=%r: unknown level", LOG_LEVEL_ENV, name)
        return logging.getLevelName(DEFAULT_LOG_LEVEL)
    return level


def configure_logging() -> None:
    logging.basicConfig(level=get_log_level(), format=LOG_FORMAT)
