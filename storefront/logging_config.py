"""Shared logger for the storefront package."""
from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

logger = logging.getLogger("storefront")


def setup_logging(level: str | int = "INFO") -> logging.Logger:
    """Attach a single stream handler to the storefront logger."""
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    logger.setLevel(level)
    if not any(getattr(h, "_storefront_handler", False) for h in logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._storefront_handler = True  # type: ignore[attr-defined]
        logger.addHandler(handler)
    return logger
