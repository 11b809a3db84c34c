"""Unit tests for logger setup."""

import logging
from pathlib import Path

from movielibrary.utils.logger import (
    _LOGGERS_CACHE,
    _create_console_handler,
    _create_file_handler,
    _get_log_file_path,
    configure_logging,
    setup_logger,
)


class TestSetupLogger:
    @staticmethod
    def test_returns_namespaced_logger() -> None:
        logger = setup_logger("test.logger.unique1")
        assert isinstance(logger, logging.Logger)
        assert logger.name == "movielibrary.test.logger.unique1"

    @staticmethod
    def test_console_handler_only_without_log_dir() -> None:
        logger = setup_logger("test.logger.unique2")
        assert len(logger.handlers) == 1
        assert not isinstance(logger.handlers[0], logging.FileHandler)

    @staticmethod
    def test_file_handler_with_log_dir(tmp_path: Path) -> None:
        logger = setup_logger("test.logger.with_file", log_dir=tmp_path)
        file_handlers = [h for h in logger.handlers if isinstance(h, logging.FileHandler)]
        assert len(file_handlers) == 1
        for handler in file_handlers:
            handler.close()

    @staticmethod
    def test_level_set() -> None:
        logger = setup_logger("test.logger.unique3", level=logging.DEBUG)
        assert logger.level == logging.DEBUG

    @staticmethod
    def test_cache_returns_same_instance() -> None:
        logger1 = setup_logger("test.logger.cached")
        logger2 = setup_logger("test.logger.cached")
        assert logger1 is logger2

    @staticmethod
    def test_propagate_disabled() -> None:
        logger = setup_logger("test.logger.unique4")
        assert logger.propagate is False

    @staticmethod
    def test_cached() -> None:
        name = "test.logger.cache_check"
        setup_logger(name)
        assert name in _LOGGERS_CACHE


class TestConfigureLogging:
    @staticmethod
    def test_updates_cached_levels() -> None:
        logger = setup_logger("test.logger.reconfigured", level=logging.INFO)
        configure_logging(logging.WARNING)
        try:
            assert logger.level == logging.WARNING
            assert all(h.level == logging.WARNING for h in logger.handlers)
        finally:
            configure_logging(logging.INFO)

    @staticmethod
    def test_adds_file_handler(tmp_path: Path) -> None:
        logger = setup_logger("test.logger.late_file")
        configure_logging(logging.INFO, tmp_path)
        try:
            file_handlers = [h for h in logger.handlers if isinstance(h, logging.FileHandler)]
            assert len(file_handlers) == 1
            assert list(tmp_path.glob("test_logger_late_file_*.log"))
        finally:
            for cached in _LOGGERS_CACHE.values():
                for handler in list(cached.handlers):
                    if isinstance(handler, logging.FileHandler):
                        handler.close()
                        cached.removeHandler(handler)


class TestCreateConsoleHandler:
    @staticmethod
    def test_returns_stream_handler() -> None:
        formatter = logging.Formatter("%(message)s")
        handler = _create_console_handler(formatter, logging.INFO)
        assert isinstance(handler, logging.StreamHandler)

    @staticmethod
    def test_level_set() -> None:
        formatter = logging.Formatter("%(message)s")
        handler = _create_console_handler(formatter, logging.WARNING)
        assert handler.level == logging.WARNING

    @staticmethod
    def test_formatter_set() -> None:
        formatter = logging.Formatter("%(message)s")
        handler = _create_console_handler(formatter, logging.INFO)
        assert handler.formatter is formatter


class TestCreateFileHandler:
    @staticmethod
    def test_returns_file_handler(tmp_path: Path) -> None:
        formatter = logging.Formatter("%(message)s")
        handler = _create_file_handler("test", formatter, logging.INFO, tmp_path)
        assert isinstance(handler, logging.FileHandler)
        handler.close()

    @staticmethod
    def test_none_without_directory() -> None:
        formatter = logging.Formatter("%(message)s")
        assert _create_file_handler("test", formatter, logging.INFO, None) is None

    @staticmethod
    def test_none_when_directory_unusable(tmp_path: Path) -> None:
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory")
        formatter = logging.Formatter("%(message)s")
        assert _create_file_handler("test", formatter, logging.INFO, blocker) is None


class TestGetLogFilePath:
    @staticmethod
    def test_creates_directory(tmp_path: Path) -> None:
        log_dir = tmp_path / "logs"
        path = _get_log_file_path("test.name", log_dir)
        assert log_dir.exists()
        assert path.parent == log_dir

    @staticmethod
    def test_filename_format(tmp_path: Path) -> None:
        path = _get_log_file_path("images.store", tmp_path)
        assert path.name.startswith("images_store_")
        assert path.suffix == ".log"

    @staticmethod
    def test_dots_replaced_in_name(tmp_path: Path) -> None:
        path = _get_log_file_path("a.b.c", tmp_path)
        assert "a_b_c" in path.name
