"""
Logging setup shared by the server and the CLI.
"""

import logging

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logger(log_level: int, name: str = "auditorzk") -> logging.Logger:
    """
    Attach a console handler to the package logger.

    Module loggers (``logging.getLogger(__name__)``) propagate to it, so
    calling this once at startup covers the whole service.

    Args:
        log_level: The logging level to set
        name: Logger to configure, the package root by default

    Returns:
        The configured logger
    """
    logger = logging.getLogger(name)
    logger.setLevel(log_level)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setLevel(log_level)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
    return logger
