# utils/logging_config.py
"""
Logging setup for applications embedding the kernel.

The kernel modules only create module loggers; handlers are installed by the
caller (request handler, batch job, test harness) through configure_logging().
"""
import logging
from typing import Optional

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


def configure_logging(level: int = logging.INFO, log_file: Optional[str] = None,
                      logger_name: str = "spatial") -> logging.Logger:
    """
    Configure the kernel's logger namespace.

    Args:
        level: Threshold level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional path of a file receiving the same records
        logger_name: Namespace to configure

    Returns:
        The configured logger
    """
    logger = logging.getLogger(logger_name)
    logger.setLevel(level)

    # Drop handlers from a previous call so records are not duplicated
    if logger.hasHandlers():
        logger.handlers.clear()

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, mode='w', encoding='utf-8')
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logger.debug("Logging initialized.")
    return logger
