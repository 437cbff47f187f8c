"""Logging setup for the route server process."""

from __future__ import annotations

import logging
import logging.config
from typing import Any

_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def build_logging_config(level: str = "INFO") -> dict[str, Any]:
    level = level.upper()
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {"standard": {"format": _FORMAT}},
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "standard",
                "stream": "ext://sys.stdout",
            }
        },
        "loggers": {
            "duck_router": {"level": level, "handlers": ["console"], "propagate": False},
            "uvicorn": {"level": level, "handlers": ["console"], "propagate": False},
        },
        "root": {"level": "WARNING", "handlers": ["console"]},
    }


def setup_logging(level: str = "INFO") -> None:
    """Apply the process logging configuration."""

    if not isinstance(logging.getLevelName(level.upper()), int):
        raise ValueError(f"Unknown log level '{level}'")
    logging.config.dictConfig(build_logging_config(level))


__all__ = ["build_logging_config", "setup_logging"]
