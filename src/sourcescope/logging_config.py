"""
Logging setup for SourceScope.

Everything logs under the ``sourcescope`` namespace to stderr through rich,
so report output on stdout (JSON, CSV) is never interleaved with log lines.

Per-file failures (unreadable files, parse failures, lint crashes) are
already reported as issues in the result, so the per-file loggers stay at
ERROR unless verbose logging is on.
"""

import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

ROOT_LOGGER = "sourcescope"

# Loggers whose warnings duplicate issues already present in the result
PER_FILE_LOGGERS = (
    "sourcescope.analysis.file_analyzer",
    "sourcescope.analysis.lint",
    "sourcescope.scanning.parser",
)

FILE_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"


def _level(verbose: bool, quiet: bool) -> int:
    if quiet:
        return logging.ERROR
    if verbose:
        return logging.DEBUG
    return logging.WARNING


def setup_logging(
    verbose: bool = False, quiet: bool = False, log_file: Optional[str] = None
) -> logging.Logger:
    """
    Route SourceScope logs to a rich stderr handler, plus an optional file.

    Args:
        verbose: DEBUG everywhere, including per-file recoveries
        quiet: Only errors
        log_file: Append plain-text logs to this path as well

    Returns:
        The ``sourcescope`` logger
    """
    level = _level(verbose, quiet)

    handlers: list[logging.Handler] = [
        RichHandler(
            console=Console(stderr=True),
            rich_tracebacks=True,
            tracebacks_show_locals=verbose,
            # Messages embed file paths and source snippets
            markup=False,
            show_path=verbose,
        )
    ]
    if log_file:
        file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
        handlers.append(file_handler)

    logging.basicConfig(level=level, format="%(message)s", datefmt="[%X]", handlers=handlers, force=True)

    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(level)
    for name in PER_FILE_LOGGERS:
        logging.getLogger(name).setLevel(level if verbose else max(level, logging.ERROR))

    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Logger under the ``sourcescope`` namespace; ``__name__`` is the usual argument."""
    if name is None:
        return logging.getLogger(ROOT_LOGGER)
    if not name.startswith(ROOT_LOGGER):
        name = f"{ROOT_LOGGER}.{name}"
    return logging.getLogger(name)
