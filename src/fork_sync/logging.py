"""Logging for fork sync runs, built on loguru.

Every line says which part of the run wrote it and, for per-fork work,
which fork it concerns:

    14:02:11 | INFO     | sync [fork-the-planet/requests] - Synced (fast-forward)
    14:02:12 | WARNING  | workflows [fork-the-planet/flask] - Disabled 2 workflow(s)
    14:02:12 | INFO     | fork_sync.github.sync.runner - Wrote sync.log

Modules log through ``get_logger(__name__)``. The scheduler and the
workflow sweep log through ``bind_repo(full_name, name=...)``. Records
from the standard library (httpx under githubkit) are routed through
loguru too.
"""

from __future__ import annotations

import inspect
import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING

from loguru import logger

if TYPE_CHECKING:
    from loguru import Logger, Record

_NOISY_LOGGERS = ("httpx", "httpcore")


def _source(record: Record, markup: bool) -> str:
    source = "{extra[name]}" if "name" in record["extra"] else "{name}"
    if "repo" in record["extra"]:
        repo = "[{extra[repo]}]"
        source += f" <magenta>{repo}</magenta>" if markup else f" {repo}"
    return f"<cyan>{source}</cyan>" if markup else source


def _console_format(record: Record) -> str:
    return (
        "<dim>{time:HH:mm:ss}</dim> | <level>{level: <8}</level> | "
        + _source(record, markup=True)
        + " - <level>{message}</level>\n{exception}"
    )


def _file_format(record: Record) -> str:
    return (
        "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | "
        + _source(record, markup=False)
        + " | {function}:{line} - {message}\n{exception}"
    )


class InterceptHandler(logging.Handler):
    """Route standard library log records to loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        level: str | int
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # Skip logging's own frames so the record points at the real caller
        frame, depth = inspect.currentframe(), 0
        while frame is not None and (depth == 0 or frame.f_code.co_filename == logging.__file__):
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())


def setup_logging(
    level: str = "INFO",
    *,
    verbose: bool = False,
    quiet: bool = False,
    log_file: Path | None = None,
    rotation: str = "10 MB",
    retention: str = "7 days",
    serialize: bool = False,
) -> None:
    """Configure console and optional file logging for a CLI invocation.

    Args:
        level: Console level from settings
        verbose: Log DEBUG to the console (wins over quiet)
        quiet: Log only WARNING and above to the console
        log_file: Also log everything at DEBUG to this file, with rotation
        rotation: When to rotate the log file (e.g. "10 MB", "1 day")
        retention: How long rotated files are kept
        serialize: Write the log file as JSON lines
    """
    if verbose:
        console_level = "DEBUG"
    elif quiet:
        console_level = "WARNING"
    else:
        console_level = level.upper()

    logger.remove()
    logger.add(sys.stderr, level=console_level, format=_console_format, backtrace=True)

    if log_file:
        logger.add(
            log_file,
            level="DEBUG",
            format=_file_format,
            rotation=rotation,
            retention=retention,
            compression="gz",
            serialize=serialize,
        )

    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)
    # httpx logs every request at INFO
    noisy_level = logging.DEBUG if console_level in ("TRACE", "DEBUG") else logging.WARNING
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(noisy_level)


def get_logger(name: str) -> Logger:
    """Logger whose lines are labelled with ``name`` (usually ``__name__``)."""
    return logger.bind(name=name)


def bind_repo(full_name: str, name: str = "sync") -> Logger:
    """Logger for work on one fork.

    Args:
        full_name: Fork in owner/name format, shown in brackets
        name: Part of the run doing the work ("sync" or "workflows")
    """
    return logger.bind(name=name, repo=full_name)


def reset_logging() -> None:
    """Remove all handlers, e.g. the stderr sink a CliRunner invocation bound."""
    logger.remove()
