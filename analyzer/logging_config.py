"""Logging configuration helpers for the analyzer."""

from __future__ import annotations

import logging
import os
from logging.config import dictConfig


def configure_logging() -> None:
    """Apply a consistent logging configuration for the analyzer and its UI."""
    log_level = os.getenv("ANALYZER_LOG_LEVEL", "INFO").upper()

    dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "standard": {
                    "format": "%(asctime)s %(levelname)s [%(name)s] %(message)s",
                },
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "formatter": "standard",
                    "level": log_level,
                },
            },
            "root": {"handlers": ["console"], "level": log_level},
            # urllib3 logs every connection at DEBUG; keep it quieter than our own loggers.
            "loggers": {
                "urllib3": {
                    "handlers": ["console"],
                    "level": os.getenv("ANALYZER_HTTP_LOG_LEVEL", "WARNING").upper(),
                    "propagate": False,
                },
            },
        }
    )

    logging.getLogger(__name__).debug("Logging configured at %s level", log_level)
