"""
Centralized logging for the photo stitcher.

Every module logs through the shared ``logger`` defined here so the CLI
can adjust verbosity in one place and tests can capture records with
caplog.
"""

import logging


def setup_logger(
        name: str = __name__,
        level: int = logging.INFO,
        formatter: logging.Formatter | None = None,
        handler: logging.Handler | None = None,
) -> logging.Logger:
    """
    Configure a logger with optional custom formatting and handler.

    Repeated calls for the same name return the same logger without
    stacking handlers.

    Args:
        name: Logger name, typically set to __name__.
        level: Logging level (e.g., logging.INFO, logging.DEBUG).
        formatter: Optional custom formatter.
        handler: Optional custom handler.

    Returns:
        A configured logger instance.

    """
    logger_instance = logging.getLogger(name)
    logger_instance.setLevel(level)
    if not logger_instance.handlers:
        if formatter is None:
            formatter = logging.Formatter(
                "%(asctime)s [%(levelname)s] %(message)s")
        if handler is None:
            handler = logging.StreamHandler()
        handler.setFormatter(formatter)
        logger_instance.addHandler(handler)
        logger_instance.propagate = False
    return logger_instance


# Shared logger used across modules
logger = setup_logger("photo_affix")


def set_verbosity(verbose: bool) -> None:  # noqa: FBT001
    """Switch the shared logger between INFO and per-image DEBUG output."""
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)
