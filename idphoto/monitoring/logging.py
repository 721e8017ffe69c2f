"""Logging configuration module."""

from __future__ import annotations

import logging

from idphoto.config.settings import get_settings

# Pillow logs every PNG chunk and JPEG marker at DEBUG.
NOISY_LOGGERS = ("PIL",)


def configure_logging() -> None:
    """Configure root logger according to project conventions."""

    settings = get_settings()
    level = getattr(logging, settings.log_level.upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.INFO))
