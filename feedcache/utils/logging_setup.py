"""Logging for processes that host the feed cache.

The package itself only ever calls ``logging.getLogger(__name__)``; handlers
are installed once by the host through one of the functions below.
"""

import logging
import logging.handlers
import sys
from pathlib import Path
from typing import List, Optional

from feedcache.config import LoggingConfig
from feedcache.utils.formatting import parse_size

DEFAULT_LOG_FILE = "logs/feedcache.log"
FILE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
CONSOLE_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"


def _console_handler(level: int) -> logging.Handler:
    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(CONSOLE_FORMAT, datefmt="%H:%M:%S"))
    return handler


def _file_handler(
    path: Path, level: int, max_bytes: int, backup_count: int, log_format: str
) -> logging.Handler:
    path.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.handlers.RotatingFileHandler(
        filename=path,
        maxBytes=max_bytes,
        backupCount=backup_count,
        encoding="utf-8",
    )
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(log_format, datefmt="%Y-%m-%d %H:%M:%S"))
    return handler


def setup_logging(
    log_level: str = "INFO",
    log_file: Optional[str] = None,
    log_to_console: bool = True,
    log_to_file: bool = True,
    max_bytes: int = 10 * 1024 * 1024,
    backup_count: int = 5,
    log_format: Optional[str] = None,
) -> logging.Logger:
    """
    Replace the root logger's handlers with console and/or rotating file output.

    Args:
        log_level: Level name; unknown names fall back to INFO
        log_file: Rotating log file path (defaults to logs/feedcache.log)
        log_to_console: Emit to stdout
        log_to_file: Emit to the rotating file
        max_bytes: Rotation threshold
        backup_count: Rotated files kept
        log_format: Format for file output

    Returns:
        The root logger
    """
    level = getattr(logging, log_level.upper(), logging.INFO)
    if not isinstance(level, int):
        level = logging.INFO

    handlers: List[logging.Handler] = []
    if log_to_console:
        handlers.append(_console_handler(level))

    file_path = Path(log_file or DEFAULT_LOG_FILE)
    if log_to_file:
        handlers.append(
            _file_handler(file_path, level, max_bytes, backup_count, log_format or FILE_FORMAT)
        )

    root = logging.getLogger()
    root.setLevel(level)
    # Re-running setup must not duplicate output
    root.handlers.clear()
    for handler in handlers:
        root.addHandler(handler)

    outputs = ["stdout"] if log_to_console else []
    if log_to_file:
        outputs.append(str(file_path))
    root.debug(f"feedcache logging at {logging.getLevelName(level)} -> {', '.join(outputs) or 'nowhere'}")
    return root


def setup_logging_from_config(config: LoggingConfig) -> logging.Logger:
    """Set up logging from the ``logging`` config section."""
    return setup_logging(
        log_level=config.level,
        log_file=config.file,
        log_to_console=config.to_console,
        log_to_file=config.to_file,
        max_bytes=parse_size(config.max_size),
        backup_count=config.backup_count,
        log_format=config.format,
    )
