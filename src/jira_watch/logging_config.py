"""
Logging configuration for jira-watch.

Records go to stderr through rich so they never interleave with the tables
and JSON printed on stdout. Library modules only call ``get_logger``; the
CLI calls ``setup_logging`` once per process with the configured verbosity.
"""

import logging
from typing import Dict, Optional

from rich.console import Console
from rich.logging import RichHandler

ROOT_LOGGER = "jira_watch"

LEVELS: Dict[str, int] = {
    "quiet": logging.ERROR,
    "normal": logging.WARNING,
    "verbose": logging.DEBUG,
}

_FILE_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


def setup_logging(verbosity: str = "normal", log_file: Optional[str] = None) -> logging.Logger:
    """
    Install the stderr handler (and optionally a file handler).

    Args:
        verbosity: ``quiet`` (errors only), ``normal`` (warnings, e.g. dropped
            components or skipped records) or ``verbose`` (every tracker
            page request and store write)
        log_file: Optional path that receives the same records in plain text

    Returns:
        The ``jira_watch`` logger
    """
    level = LEVELS[verbosity]
    verbose = verbosity == "verbose"

    handlers: list = [
        RichHandler(
            console=Console(stderr=True),
            rich_tracebacks=True,
            tracebacks_show_locals=verbose,
            markup=False,  # issue summaries may contain [brackets]
            show_path=verbose,
        )
    ]
    if log_file:
        file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
        file_handler.setFormatter(logging.Formatter(_FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
        handlers.append(file_handler)

    # force: drop handlers left by an earlier call in the same process
    logging.basicConfig(
        level=level, format="%(message)s", datefmt="[%X]", handlers=handlers, force=True
    )

    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(level)

    # httpx logs each request at INFO
    logging.getLogger("httpx").setLevel(logging.DEBUG if verbose else logging.WARNING)

    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Logger under the ``jira_watch`` namespace, e.g. ``get_logger(__name__)``."""
    if not name:
        return logging.getLogger(ROOT_LOGGER)
    if not name.startswith(ROOT_LOGGER):
        name = f"{ROOT_LOGGER}.{name}"
    return logging.getLogger(name)
