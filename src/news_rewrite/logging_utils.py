"""Console logging for the pipeline, rendered with rich."""

import logging

from rich.logging import RichHandler

LOGGER_NAME = "news_rewrite"


def setup_logging(level: str = "INFO") -> logging.Logger:
    """Attach a rich console handler to the package logger.

    Args:
        level: Level name such as "DEBUG" or "INFO"; unknown names fall back to INFO.

    Returns:
        The configured ``news_rewrite`` logger.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(_level_from_string(level))
    logger.handlers = []
    logger.propagate = False

    console_handler = RichHandler(rich_tracebacks=True, show_time=True, show_level=True)
    console_handler.setLevel(_level_from_string(level))
    console_handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(console_handler)
    return logger


def _level_from_string(level: str) -> int:
    return getattr(logging, level.upper(), logging.INFO)
