from __future__ import annotations

import logging
import os
from dataclasses import dataclass


def _getenv_str(name: str, default: str) -> str:
    value = os.getenv(name)
    return default if value is None else value


def _getenv_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    return int(value)


@dataclass(frozen=True)
class DraftyConfig:
    DRAFTY_PREVIEW_MAX_LENGTH: int
    DRAFTY_LOG_LEVEL: str
    DRAFTY_MAX_SPANS: int
    DRAFTY_MAX_ENTITIES: int


def load_config() -> DraftyConfig:
    preview_max_length = _getenv_int("DRAFTY_PREVIEW_MAX_LENGTH", 64)
    if preview_max_length < 0:
        raise ValueError("DRAFTY_PREVIEW_MAX_LENGTH must be >= 0")

    return DraftyConfig(
        DRAFTY_PREVIEW_MAX_LENGTH=preview_max_length,
        DRAFTY_LOG_LEVEL=_getenv_str("DRAFTY_LOG_LEVEL", "INFO").strip().upper() or "INFO",
        DRAFTY_MAX_SPANS=_getenv_int("DRAFTY_MAX_SPANS", 1024),
        DRAFTY_MAX_ENTITIES=_getenv_int("DRAFTY_MAX_ENTITIES", 256),
    )


def configure_logging(config: DraftyConfig) -> None:
    level = logging.getLevelName(config.DRAFTY_LOG_LEVEL)
    if not isinstance(level, int):
        level = logging.INFO
    logging.getLogger("drafty").setLevel(level)
