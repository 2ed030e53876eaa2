"""
Logging configuration for moss_tui.

While a run is active the viewport owns the terminal, so DEBUG detail is
kept in a rotating file and only WARNING+ reaches stderr, where it scrolls
above the viewport like any other output.

Usage:
    from moss_tui.logging_config import get_logger, setup_logging
    setup_logging("logs")        # once, from the application entry point
    logger = get_logger(__name__)
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path


LOGGER_NAME = "moss_tui"
LOG_FILE_NAME = "debug.log"
MAX_LOG_SIZE = 10 * 1024 * 1024  # 10 MB per file
BACKUP_COUNT = 5

FILE_FORMAT = "%(asctime)s.%(msecs)03d | %(levelname)-8s | %(name)-22s | %(message)s"
FILE_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
STDERR_FORMAT = "%(levelname)-8s | %(name)s | %(message)s"

_logging_initialized = False


def _file_handler(log_path: Path, level: int) -> logging.Handler:
    handler = RotatingFileHandler(
        log_path,
        maxBytes=MAX_LOG_SIZE,
        backupCount=BACKUP_COUNT,
        encoding="utf-8",
    )
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt=FILE_FORMAT, datefmt=FILE_DATE_FORMAT))
    return handler


def _stderr_handler(level: int) -> logging.Handler:
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt=STDERR_FORMAT))
    return handler


def setup_logging(
    log_root: Path | str | None,
    log_level: int = logging.DEBUG,
    console_level: int = logging.WARNING,
) -> Path | None:
    """
    Install the moss_tui handlers, replacing any installed earlier.

    Args:
        log_root: Directory for debug.log, created if missing. None logs to
            stderr only.
        log_level: Level for the log file (default: DEBUG)
        console_level: Level for stderr (default: WARNING)

    Returns:
        Path to the log file, or None when there is none
    """
    global _logging_initialized

    package_logger = logging.getLogger(LOGGER_NAME)
    package_logger.setLevel(min(log_level, console_level))
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
        handler.close()

    log_path = None
    if log_root is not None:
        log_dir = Path(log_root)
        log_dir.mkdir(parents=True, exist_ok=True)
        log_path = log_dir / LOG_FILE_NAME
        package_logger.addHandler(_file_handler(log_path, log_level))
    package_logger.addHandler(_stderr_handler(console_level))

    if not _logging_initialized:
        package_logger.info(f"Logging started | file={log_path.absolute() if log_path else 'none'}")
        _logging_initialized = True

    return log_path


def get_logger(name: str) -> logging.Logger:
    """Return a logger nested under the moss_tui logger."""
    if name == LOGGER_NAME or name.startswith(f"{LOGGER_NAME}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{LOGGER_NAME}.{name}")


def log_input(
    logger: logging.Logger,
    kind: str,
    details: str | None = None,
) -> None:
    """Log an input taken off the merged stream."""
    details_str = f" | {details}" if details else ""
    logger.debug(f"INPUT | {kind}{details_str}")


def log_surface(
    logger: logging.Logger,
    operation: str,
    success: bool = True,
    details: str | None = None,
) -> None:
    """Log a render surface operation."""
    status = "OK" if success else "FAILED"
    details_str = f" | {details}" if details else ""
    logger.debug(f"SURFACE | {operation} | {status}{details_str}")
