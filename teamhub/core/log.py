"""Logging setup for the teamhub package."""

from __future__ import annotations

import logging

from .config import Settings, get_settings

LOGGER_NAME = "teamhub"


def configure_logging(settings: Settings | None = None) -> logging.Logger:
    """Attach a stream handler to the package logger and apply the configured level.

    Safe to call more than once; the handler is only installed the first time.
    """
    settings = settings or get_settings()
    numeric = getattr(logging, settings.log_level, logging.INFO)
    logger = logging.getLogger(LOGGER_NAME)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("[%(levelname)s] %(name)s: %(message)s"))
        logger.addHandler(handler)
    logger.setLevel(numeric)
    return logger
