"""Logging configuration for Template Store.

Every record carries the configured templates backend in ``extra["backend"]``
so that local and remote runs can be told apart in shared log files.
"""

import sys

from loguru import logger

from template_store.config import settings

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<magenta>{extra[backend]}</magenta> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {extra[backend]} | {name}:{function}:{line} - {message}"


def setup_logger(backend: str = None):
    """
    Configure the shared loguru logger.

    Args:
        backend: Backend label bound to every record. Defaults to settings.templates_backend
    """
    logger.remove()
    logger.configure(extra={"backend": backend or settings.templates_backend})

    logger.add(sys.stdout, level=settings.log_level, format=CONSOLE_FORMAT, colorize=True)

    if settings.log_file:
        logger.add(
            settings.log_file,
            level=settings.log_level,
            format=FILE_FORMAT,
            rotation="10 MB",
            retention="30 days",
            compression="zip",
        )

    return logger


logger = setup_logger()
