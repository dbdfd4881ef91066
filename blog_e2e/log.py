"""
Per-run logging handle.

A logger is built once at the runner boundary and handed explicitly to
page objects, action wrappers, assertions and fixtures, so output capture
stays per-run instead of flowing through a module-level singleton.
"""

from __future__ import annotations

import logging
from pathlib import Path

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def create_run_logger(
    run_id: str,
    level: str | int = logging.INFO,
    log_file: Path | None = None,
) -> logging.Logger:
    """
    Create the logging handle for one test run.

    Args:
        run_id: Identifier of the run; becomes part of the logger name.
        level: Console log level (name or number).
        log_file: Optional path of a debug-level execution log.

    Returns:
        Logger named ``blog_e2e.run.<run_id>``.
    """
    run_logger = logging.getLogger(f"blog_e2e.run.{run_id}")
    run_logger.setLevel(logging.DEBUG)
    # pytest's capture and live-log handlers sit on the root logger.
    run_logger.propagate = True

    for handler in list(run_logger.handlers):
        run_logger.removeHandler(handler)
        handler.close()

    console = logging.StreamHandler()
    console.setLevel(level if isinstance(level, int) else logging.getLevelName(level.upper()))
    console.setFormatter(logging.Formatter(LOG_FORMAT))
    run_logger.addHandler(console)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        run_logger.addHandler(file_handler)

    return run_logger


def close_run_logger(run_logger: logging.Logger) -> None:
    """Detach and close every handler attached by :func:`create_run_logger`."""
    for handler in list(run_logger.handlers):
        run_logger.removeHandler(handler)
        handler.close()


def resolve(run_logger: logging.Logger | None, fallback: logging.Logger) -> logging.Logger:
    """Return the explicit run logger when one was passed, else the module fallback."""
    return run_logger if run_logger is not None else fallback
