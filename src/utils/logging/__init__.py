"""
Structured logging configuration

Provides JSON-formatted and console logging with per-record context.

Usage:
    from utils.logging import setup_logging, get_logger

    # Setup logging (call once at application startup)
    setup_logging(level="INFO", json_format=True)

    logger = get_logger(__name__)
    logger.info("Record routed", extra={"topic": "logs", "outcome": "modified"})
"""

from .config import configure_from_env, get_logger, setup_logging, shutdown_logging
from .formatters import ConsoleFormatter, JSONFormatter

__all__ = [
    "setup_logging",
    "get_logger",
    "configure_from_env",
    "shutdown_logging",
    "JSONFormatter",
    "ConsoleFormatter",
]
