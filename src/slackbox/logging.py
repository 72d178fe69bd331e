"""Logging configuration for slackbox.

Handlers are attached once to the package logger "slackbox"; the store,
sync and cli modules log through "slackbox.<component>" children that
propagate to it, so one setup_logging() call at process start covers all of
them. Log files go to ~/.slackbox/logs/ unless the config names another
directory.
"""

import logging
import sys
from pathlib import Path

DEFAULT_LOG_DIR = Path.home() / ".slackbox" / "logs"


def setup_logging(
    name: str,
    log_dir: Path | None = None,
    level: int = logging.INFO,
    console: bool = True,
) -> logging.Logger:
    """Install slackbox handlers for the process entry point `name`.

    The file handler (<log_dir>/<name>.log) and optional stderr handler go
    on the package logger, so records from every slackbox.* component end up
    in the entry point's log file. Later calls only adjust the level; the
    first caller's handlers stay.

    Args:
        name: Entry point name (log filename and returned logger suffix)
        log_dir: Directory for log files (defaults to ~/.slackbox/logs/)
        level: Level applied to the whole slackbox namespace
        console: Whether to also log to stderr (defaults to True)

    Returns:
        The "slackbox.<name>" logger
    """
    if log_dir is None:
        log_dir = DEFAULT_LOG_DIR

    log_dir.mkdir(parents=True, exist_ok=True)

    package_logger = logging.getLogger("slackbox")
    package_logger.setLevel(level)
    component_logger = logging.getLogger(f"slackbox.{name}")

    if package_logger.handlers:
        return component_logger

    formatter = logging.Formatter(
        fmt="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    # Handlers stay at NOTSET; filtering happens on the package logger level.
    file_handler = logging.FileHandler(log_dir / f"{name}.log", encoding="utf-8")
    file_handler.setFormatter(formatter)
    package_logger.addHandler(file_handler)

    if console:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(formatter)
        package_logger.addHandler(console_handler)

    return component_logger


def get_logger(name: str) -> logging.Logger:
    """Get a logger for a slackbox component.

    For file output, call setup_logging() once at process start.

    Args:
        name: Logger name (will be prefixed with 'slackbox.')

    Returns:
        Logger instance
    """
    return logging.getLogger(f"slackbox.{name}")
