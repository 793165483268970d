#!/usr/bin/env python
"""
Logging system for psmqc package.

This module provides a centralized logging system with multiple verbosity levels
to track the summarization steps (PSM loading, FDR estimation, filtering, stats).
"""

import logging
import os
import sys
import time
from datetime import datetime

# Define log levels
LOG_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}

# Default format for log messages
DEFAULT_LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DETAILED_LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s (%(filename)s:%(lineno)d): %(message)s"

# Name of the package logger; "psmqc.*" loggers propagate to it
PACKAGE_LOGGER = "psmqc"

# Loggers created through get_logger, keyed by name
_loggers = {}


def _is_package_child(name):
    return name.startswith(PACKAGE_LOGGER + ".")


def get_logger(name="psmqc", level=None, log_file=None, detailed=False):
    """
    Get or create a logger with the specified name and configuration.

    Handlers are only attached to the package logger ("psmqc") and to loggers outside the
    package. "psmqc.*" loggers have no handlers of their own and propagate to the package
    logger, so their level is inherited unless ``level`` is given.

    Args:
        name (str): Name of the logger (default: "psmqc")
        level (str or int): Log level (default: from PSMQC_LOG_LEVEL or INFO)
        log_file (str): Path to log file (default: None, logs to console only)
        detailed (bool): Whether to use detailed log format with file and line info

    Returns:
        logging.Logger: Configured logger instance
    """
    if name in _loggers:
        return _loggers[name]

    logger = logging.getLogger(name)

    if isinstance(level, str):
        level = LOG_LEVELS.get(level.upper(), logging.INFO)

    if _is_package_child(name):
        if PACKAGE_LOGGER not in _loggers:
            get_logger(PACKAGE_LOGGER)

        for handler in logger.handlers[:]:
            logger.removeHandler(handler)
            handler.close()
        logger.setLevel(logging.NOTSET if level is None else level)

        _loggers[name] = logger
        return logger

    if level is None:
        level = LOG_LEVELS.get(os.environ.get("PSMQC_LOG_LEVEL", "INFO").upper(), logging.INFO)

    logger.setLevel(level)

    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
        handler.close()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)

    log_format = DETAILED_LOG_FORMAT if detailed else DEFAULT_LOG_FORMAT
    formatter = logging.Formatter(log_format)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    _loggers[name] = logger

    return logger


class Timer:
    """
    Timer class for measuring and logging execution time of operations.

    Usage:
        with Timer(logger, "Operation name"):
            # code to time
    """

    def __init__(self, logger, operation_name):
        self.logger = logger
        self.operation_name = operation_name
        self.start_time = None
        self.elapsed = 0.0

    def __enter__(self):
        self.start_time = time.time()
        self.logger.info(f"Starting {self.operation_name}")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.elapsed = time.time() - self.start_time
        if exc_type:
            self.logger.error(f"{self.operation_name} failed after {self.elapsed:.2f} seconds")
        else:
            self.logger.info(f"Completed {self.operation_name} in {self.elapsed:.2f} seconds")


def log_system_info(logger):
    """
    Log system information at the start of execution.

    Args:
        logger (logging.Logger): Logger to use
    """
    import platform

    logger.info("=" * 50)
    logger.info(f"psmqc execution started at {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")
    logger.info(f"System: {platform.system()} {platform.release()} ({platform.machine()})")
    logger.info(f"Python: {platform.python_version()}")
    logger.info("=" * 50)


def configure_package_logging(level=None, log_file=None, detailed=False):
    """
    Configure logging for the entire psmqc package.

    Args:
        level (str or int): Log level (default: from environment or INFO)
        log_file (str): Path to log file (default: None, logs to console only)
        detailed (bool): Whether to use detailed log format with file and line info

    Returns:
        logging.Logger: Root logger for the package
    """
    # Drop cached loggers so the new level and handlers take effect
    _loggers.clear()

    root_logger = get_logger(PACKAGE_LOGGER, level, log_file, detailed)

    # Module loggers inherit the package level
    for name in list(logging.Logger.manager.loggerDict):
        if _is_package_child(name):
            get_logger(name)

    log_system_info(root_logger)

    return root_logger
