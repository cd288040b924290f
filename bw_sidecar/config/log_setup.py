"""Process-wide logging configuration.

Call `config_setup_logging()` once at startup, then use
`logging.getLogger(__name__)` in every module.
"""

from __future__ import annotations

import logging
import logging.config
import sys


def config_setup_logging(level: str = "INFO") -> None:
    """Configure root, uvicorn and access loggers to write to stdout.

    Args:
        level: Logging level name such as `INFO` or `DEBUG`.

    Returns:
        None: Logging configuration is applied as side effect.

    Raises:
        ValueError: Raised by `logging.config` when the level name is unknown.
    """

    normalized_level = level.strip().upper()
    config = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "standard": {
                "format": "%(asctime)s %(levelname)s %(name)s %(message)s",
                "datefmt": "%Y-%m-%d %H:%M:%S",
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "level": normalized_level,
                "formatter": "standard",
                "stream": sys.stdout,
            },
        },
        "root": {"level": normalized_level, "handlers": ["console"]},
        "loggers": {
            "uvicorn": {"level": normalized_level, "handlers": ["console"], "propagate": False},
            "uvicorn.error": {"level": normalized_level, "handlers": ["console"], "propagate": False},
            # Per-request lines come from the application access middleware.
            "uvicorn.access": {"level": "WARNING", "handlers": ["console"], "propagate": False},
            "httpx": {"level": "WARNING", "handlers": ["console"], "propagate": False},
        },
    }

    logging.config.dictConfig(config)
