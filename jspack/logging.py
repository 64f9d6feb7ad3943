"""Shared logger setup for the bundler and its command line."""

from __future__ import annotations

import logging
from pathlib import Path

_ROOT = "jspack"
_CONSOLE_FORMAT = "[jspack] %(levelname)s %(message)s"
_FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def get_logger(name: str | None = None) -> logging.Logger:
    """Logger for one pipeline stage, e.g. ``get_logger("graph")`` -> ``jspack.graph``."""
    return logging.getLogger(f"{_ROOT}.{name}" if name else _ROOT)


def _attach(logger: logging.Logger, handler: logging.Handler, fmt: str) -> None:
    handler.setLevel(logger.level)
    handler.setFormatter(logging.Formatter(fmt))
    logger.addHandler(handler)


def configure_logging(
    *, verbose: bool = False, log_file: Path | None = None
) -> logging.Logger:
    """Send build logs to stderr, and to ``log_file`` as well when one is given.

    Each call replaces the handlers installed by the previous one.
    """
    logger = logging.getLogger(_ROOT)
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    logger.propagate = False

    # Repeated calls in one process must not stack handlers.
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    _attach(logger, logging.StreamHandler(), _CONSOLE_FORMAT)
    if log_file is not None:
        _attach(logger, logging.FileHandler(log_file, encoding="utf-8"), _FILE_FORMAT)
    return logger


__all__ = ["configure_logging", "get_logger"]
