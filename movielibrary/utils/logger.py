"""Logging configuration with console and optional file handlers."""

import logging
import sys
from datetime import datetime
from pathlib import Path

_LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
_LOG_DATE_FORMAT = "%H:%M:%S"
_LOGGERS_CACHE: dict[str, logging.Logger] = {}


def setup_logger(
    name: str,
    level: int | str = logging.INFO,
    log_dir: Path | None = None,
) -> logging.Logger:
    """Configure and return a logger with console and file handlers.

    Args:
        name: Logger name (e.g., 'images.store').
        level: Logging level (default INFO).
        log_dir: Directory for log files. If None, only the console
            handler is attached.

    Returns:
        Configured logger instance.
    """
    if name in _LOGGERS_CACHE:
        return _LOGGERS_CACHE[name]

    logger = logging.getLogger(f"movielibrary.{name}")
    logger.setLevel(level)
    logger.handlers.clear()
    logger.propagate = False

    formatter = logging.Formatter(_LOG_FORMAT, _LOG_DATE_FORMAT)

    console_handler = _create_console_handler(formatter, level)
    logger.addHandler(console_handler)

    file_handler = _create_file_handler(name, formatter, level, log_dir)
    if file_handler:
        logger.addHandler(file_handler)

    _LOGGERS_CACHE[name] = logger
    return logger


def configure_logging(level: int | str, log_dir: Path | None = None) -> None:
    """Apply a level (and optionally a log directory) to every cached logger.

    Module loggers are created at import time with defaults; the
    composition root calls this once settings are known.

    Args:
        level: New logging level.
        log_dir: Directory for log files, or None to keep console only.
    """
    formatter = logging.Formatter(_LOG_FORMAT, _LOG_DATE_FORMAT)
    for name, logger in _LOGGERS_CACHE.items():
        logger.setLevel(level)
        for handler in logger.handlers:
            handler.setLevel(level)
        has_file = any(isinstance(h, logging.FileHandler) for h in logger.handlers)
        if log_dir is not None and not has_file:
            file_handler = _create_file_handler(name, formatter, level, log_dir)
            if file_handler:
                logger.addHandler(file_handler)


def _create_console_handler(
    formatter: logging.Formatter,
    level: int | str,
) -> logging.StreamHandler:
    """Create console stream handler.

    Args:
        formatter: Log formatter.
        level: Logging level.

    Returns:
        Configured StreamHandler.
    """
    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(formatter)
    return handler


def _create_file_handler(
    name: str,
    formatter: logging.Formatter,
    level: int | str,
    log_dir: Path | None,
) -> logging.FileHandler | None:
    """Create a dated file handler.

    Args:
        name: Logger name for filename.
        formatter: Log formatter.
        level: Logging level.
        log_dir: Directory for log files.

    Returns:
        Configured FileHandler, or None when no directory is given or
        the file cannot be opened.
    """
    if log_dir is None:
        return None
    try:
        log_path = _get_log_file_path(name, log_dir)
        handler = logging.FileHandler(log_path, encoding="utf-8")
        handler.setLevel(level)
        handler.setFormatter(formatter)
        return handler
    except OSError as e:
        print(f"Warning: Could not create log file: {e}", file=sys.stderr)
        return None


def _get_log_file_path(name: str, log_dir: Path) -> Path:
    """Build log file path with date suffix.

    Args:
        name: Logger name.
        log_dir: Base directory for logs.

    Returns:
        Full path to log file.
    """
    log_dir.mkdir(parents=True, exist_ok=True)

    safe_name = name.replace(".", "_").replace("/", "_")
    date_suffix = datetime.now().strftime("%Y%m%d")
    filename = f"{safe_name}_{date_suffix}.log"

    return log_dir / filename
