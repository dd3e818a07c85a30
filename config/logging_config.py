"""
Logging configuration for the hearing transcript loader
"""
import logging
import logging.handlers
from pathlib import Path
from typing import Optional

from config.settings import settings


def setup_logging(level: Optional[str] = None, log_file: Optional[str] = None):
    """Configure application logging"""
    level = level or settings.log_level
    log_file = log_file or settings.log_file

    # Ensure log directory exists
    Path(log_file).parent.mkdir(parents=True, exist_ok=True)

    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper()))

    # Clear existing handlers
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    # File handler with rotation
    file_handler = logging.handlers.RotatingFileHandler(
        log_file,
        maxBytes=10 * 1024 * 1024,  # 10MB
        backupCount=5
    )
    file_handler.setFormatter(formatter)
    root_logger.addHandler(file_handler)

    # SQL statements only when asked for through sql_echo
    logging.getLogger('sqlalchemy').setLevel(logging.WARNING)

    return root_logger


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance for a specific module"""
    return logging.getLogger(name)
