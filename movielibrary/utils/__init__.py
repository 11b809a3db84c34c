"""Shared utilities: logging."""

from movielibrary.utils.logger import configure_logging, setup_logger

__all__ = ["configure_logging", "setup_logger"]
