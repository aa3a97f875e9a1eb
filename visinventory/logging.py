"""Logging setup shared by the CLI, walker and service."""

from __future__ import annotations

import logging
from pathlib import Path

_ROOT = "visinventory"
_CONSOLE_FORMAT = "[visinventory] %(levelname)s %(message)s"
# Worker threads interleave per-package lines; the thread name keeps them apart.
_FILE_FORMAT = "%(asctime)s %(levelname)s %(threadName)s %(name)s: %(message)s"


def get_logger(name: str | None = None) -> logging.Logger:
    """Return ``visinventory.<name>``, or the root inventory logger."""
    return logging.getLogger(f"{_ROOT}.{name}" if name else _ROOT)


def configure_logging(
    *, verbose: bool = False, log_file: Path | None = None
) -> logging.Logger:
    """Install the console handler and, when ``log_file`` is set, a run log.

    The run log always records DEBUG so skipped files and provenance misses
    are kept even when the console only shows INFO.
    """
    console_level = logging.DEBUG if verbose else logging.INFO
    logger = logging.getLogger(_ROOT)
    logger.propagate = False
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console = logging.StreamHandler()
    console.setLevel(console_level)
    console.setFormatter(logging.Formatter(_CONSOLE_FORMAT))
    logger.addHandler(console)

    if log_file is None:
        logger.setLevel(console_level)
        return logger

    log_file.parent.mkdir(parents=True, exist_ok=True)
    run_log = logging.FileHandler(log_file, mode="w", encoding="utf-8")
    run_log.setLevel(logging.DEBUG)
    run_log.setFormatter(logging.Formatter(_FILE_FORMAT))
    logger.addHandler(run_log)
    logger.setLevel(logging.DEBUG)
    return logger


__all__ = ["configure_logging", "get_logger"]
