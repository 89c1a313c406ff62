"""Logging setup helpers for xlist-scraper."""

from __future__ import annotations

import logging

LOGGER_NAME = "xlist_scraper"


def configure_logging(debug: bool = False, level: str | None = None) -> None:
    if debug:
        resolved = logging.DEBUG
    elif level:
        resolved = logging.getLevelName(level.strip().upper())
        if not isinstance(resolved, int):
            resolved = logging.INFO
    else:
        resolved = logging.INFO
    logging.basicConfig(
        level=resolved,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )


def get_logger(name: str | None = None) -> logging.Logger:
    return logging.getLogger(name or LOGGER_NAME)
