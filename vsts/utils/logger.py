"""Logging utilities for the VSTS client."""

import logging
import sys
import colorlog


def setup_logger(name: str, log_level: str = "INFO") -> logging.Logger:
    """
    Set up a colorized logger for console output.

    Args:
        name: Logger name (usually __name__)
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)

    # Avoid adding handlers multiple times
    if logger.handlers:
        return logger

    level = getattr(logging, log_level.upper(), logging.INFO)
    logger.setLevel(level)

    handler = colorlog.StreamHandler(sys.stderr)
    handler.setLevel(level)

    formatter = colorlog.ColoredFormatter(
        "%(log_color)s%(levelname)-8s%(reset)s %(blue)s%(name)s%(reset)s: %(message)s",
        reset=True,
        log_colors={
            "DEBUG": "cyan",
            "INFO": "green",
            "WARNING": "yellow",
            "ERROR": "red",
            "CRITICAL": "red,bg_white",
        },
        style="%",
    )

    handler.setFormatter(formatter)
    logger.addHandler(handler)

    return logger


def set_log_level(log_level: str, prefix: str = "vsts") -> None:
    """
    Change the level of every logger created under ``prefix``.

    Args:
        log_level: New logging level name
        prefix: Logger name prefix to update
    """
    level = getattr(logging, log_level.upper(), logging.INFO)
    for name, existing in logging.root.manager.loggerDict.items():
        if not isinstance(existing, logging.Logger):
            continue
        if name == prefix or name.startswith(prefix + "."):
            existing.setLevel(level)
            for handler in existing.handlers:
                handler.setLevel(level)
