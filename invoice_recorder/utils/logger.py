"""
Logging Utility Module

Configures structured logging for the application with both
console and file output support.
"""

import logging
import sys
from typing import Optional

import structlog

from invoice_recorder.core.config import get_settings

_file_handler: Optional[logging.FileHandler] = None


def configure_logging() -> None:
    """
    Configure structured logging for the application.

    Sets up both console and file handlers based on configuration.
    Safe to call more than once; the file handler is attached only once.
    """
    global _file_handler
    settings = get_settings()
    level = getattr(logging, settings.log_level.upper(), logging.INFO)

    # Configure standard library logging
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=level,
    )

    # Configure structlog
    processors = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if settings.enable_console_logging:
        processors.append(structlog.dev.ConsoleRenderer())
    else:
        processors.append(structlog.processors.KeyValueRenderer())

    structlog.configure(
        processors=processors,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    if settings.enable_file_logging and _file_handler is None:
        log_file = settings.log_dir / "bot.log"
        _file_handler = logging.FileHandler(log_file)
        _file_handler.setLevel(level)

        formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        )
        _file_handler.setFormatter(formatter)

        logging.getLogger().addHandler(_file_handler)


def get_logger(name: Optional[str] = None) -> structlog.stdlib.BoundLogger:
    """
    Get a structured logger instance.

    Args:
        name: Logger name (usually __name__)

    Returns:
        BoundLogger: Configured logger instance
    """
    return structlog.get_logger(name)


# Configure on module import
configure_logging()
