"""Logging configuration for the application."""

import logging
import sys

from app.core.config import get_settings

# Client libraries that log every store request at INFO.
_CHATTY_LOGGERS = ("httpx", "httpcore", "google.auth.transport")


def setup_logging() -> None:
    """Configure application-wide logging.

    Level is DEBUG when settings.debug is True, otherwise settings.log_level.
    Store client request logs are raised to WARNING unless debugging.
    Output goes to stdout.
    """
    settings = get_settings()
    log_level = (
        logging.DEBUG
        if settings.debug
        else logging.getLevelNamesMapping().get(settings.log_level.upper(), logging.INFO)
    )
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )
    if not settings.debug:
        for name in _CHATTY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Return a module logger; pass ``__name__``."""
    return logging.getLogger(name)
