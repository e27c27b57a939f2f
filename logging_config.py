"""Logging configuration using loguru with console/JSON output selection."""

import sys
from loguru import logger

from config import settings


def configure_logging() -> None:
    """
    Configure loguru based on environment settings.

    - Interactive terminal with LOG_FORMAT=console: colorized, human-readable lines
    - Anything else: JSON-serialized records on stdout
    """
    logger.remove()
    logger.configure(extra={"component": "app"})

    if sys.stderr.isatty() and settings.LOG_FORMAT == "console":
        logger.add(
            sys.stderr,
            format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{extra[component]}</cyan> | <level>{message}</level>",
            level=settings.LOG_LEVEL,
            colorize=True,
        )
    else:
        logger.add(
            sys.stdout,
            format="{message}",
            level=settings.LOG_LEVEL,
            serialize=True,
            diagnose=False,
        )


def get_logger(component: str):
    """Return a logger bound to a component name."""
    return logger.bind(component=component)


configure_logging()

__all__ = ["logger", "get_logger", "configure_logging"]
