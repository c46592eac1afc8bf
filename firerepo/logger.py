"""
Centralized logging configuration for the package.
"""
import os
import sys
import logging

LOGGER_NAME = 'firerepo'


def _setup_logger(logger: logging.Logger) -> None:
    """Configure the logger with stdout/stderr handlers, once."""
    log_level = os.getenv('LOG_LEVEL', 'INFO').upper()
    logger.setLevel(getattr(logging, log_level, logging.INFO))

    formatter = logging.Formatter(
        '%(asctime)s [%(levelname)s] %(name)s: %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    # Errors go to stderr only
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.addFilter(lambda record: record.levelno < logging.ERROR)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    error_handler = logging.StreamHandler(sys.stderr)
    error_handler.setLevel(logging.ERROR)
    error_handler.setFormatter(formatter)
    logger.addHandler(error_handler)


def get_logger() -> logging.Logger:
    """
    Get the package logger, configuring it on first use.

    Returns:
        logging.Logger: The configured logger instance
    """
    logger = logging.getLogger(LOGGER_NAME)
    if not logger.handlers:
        _setup_logger(logger)
    return logger
