"""
Test cases for the logging module.
"""

import logging

from psmqc.logging import Timer, configure_package_logging, get_logger, log_system_info


class TestLogging:
    """Test logging functionality."""

    def test_get_logger(self):
        """Test that get_logger creates a logger."""
        logger = get_logger("test_logger")
        assert logger is not None
        assert isinstance(logger, logging.Logger)
        assert logger.name == "test_logger"

    def test_get_logger_is_cached(self):
        """Test that the same logger is returned for the same name."""
        assert get_logger("test_cached") is get_logger("test_cached", level="DEBUG")

    def test_level_from_environment(self, monkeypatch):
        """Test that PSMQC_LOG_LEVEL sets the default level."""
        monkeypatch.setenv("PSMQC_LOG_LEVEL", "WARNING")
        logger = get_logger("test_env_level")
        assert logger.level == logging.WARNING

    def test_log_file(self, tmp_path):
        """Test that messages are also written to the log file."""
        log_file = tmp_path / "psmqc.log"
        logger = get_logger("test_file_logger", level="INFO", log_file=str(log_file))
        logger.info("written to file")

        for handler in logger.handlers:
            handler.flush()

        assert "written to file" in log_file.read_text()

    def test_log_system_info(self, caplog):
        """Test that log_system_info logs the Python version."""
        logger = get_logger("test_system_info")
        with caplog.at_level(logging.INFO):
            log_system_info(logger)
        assert "Python:" in caplog.text

    def test_timer(self, caplog):
        """Test that Timer logs the start and completion of an operation."""
        logger = get_logger("test_timer")
        with caplog.at_level(logging.INFO):
            with Timer(logger, "test operation") as timer:
                pass
        assert timer.elapsed >= 0
        assert "Starting test operation" in caplog.text
        assert "Completed test operation" in caplog.text

    def test_configure_package_logging(self):
        """Test that configure_package_logging sets the level of every package logger."""
        import psmqc.modules.psm.filters  # noqa: F401

        root_logger = configure_package_logging(level="DEBUG")
        try:
            assert root_logger.name == "psmqc"
            assert root_logger.level == logging.DEBUG
            assert get_logger("psmqc.modules.psm.fdr").getEffectiveLevel() == logging.DEBUG
            assert logging.getLogger("psmqc.modules.psm.filters").getEffectiveLevel() == logging.DEBUG
        finally:
            configure_package_logging(level="INFO")

    def test_module_logger_has_no_handlers(self):
        """Test that module loggers propagate to the package logger instead of writing themselves."""
        logger = get_logger("psmqc.modules.psm.stats")
        assert logger.handlers == []
        assert logger.propagate
        assert logging.getLogger("psmqc").handlers

    def test_module_message_written_once(self, tmp_path):
        """Test that a message from a module logger is written exactly once."""
        log_file = tmp_path / "psmqc.log"
        configure_package_logging(level="DEBUG", log_file=str(log_file))
        try:
            get_logger("psmqc.modules.psm.aggregator").info("aggregator message")
            for handler in logging.getLogger("psmqc").handlers:
                handler.flush()

            assert log_file.read_text().count("aggregator message") == 1
        finally:
            configure_package_logging(level="INFO")
