"""Centralized logging configuration."""

import logging

from agroclima.config import DEBUG


def configure_logging():
    """
    Configure a consistent logging format for the API, its server and its drivers.
    """
    level = logging.DEBUG if DEBUG else logging.INFO

    formatter = logging.Formatter(
        fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    # Remove any existing handlers
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    # Third-party loggers get their own handler with the same format
    loggers_to_configure = {
        "uvicorn": logging.INFO,
        "uvicorn.access": logging.INFO,
        "uvicorn.error": logging.INFO,
        "httpx": logging.WARNING,
        "fastapi": logging.INFO,
        "sqlalchemy.engine": logging.WARNING,
    }

    for logger_name, logger_level in loggers_to_configure.items():
        logger = logging.getLogger(logger_name)
        logger.setLevel(logger_level)

        for handler in logger.handlers[:]:
            logger.removeHandler(handler)

        # Don't propagate to avoid duplicate messages
        logger.propagate = False

        handler = logging.StreamHandler()
        handler.setLevel(logger_level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)
