"""Logging configuration for the client.

This module provides centralized logging configuration.
Import `get_logger` to create loggers in other modules.
"""

import logging
import sys
from functools import lru_cache


def configure_logging(level: int = logging.INFO) -> None:
    """Configure logging for the client.

    This should be called once by the embedding application.
    Configures the root logger and sets appropriate levels.

    Args:
        level: Log level for the campaign_client package
    """
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,  # Override any existing configuration
    )

    logging.getLogger("campaign_client").setLevel(level)

    # Reduce noise from the HTTP stack
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


@lru_cache(maxsize=None)
def get_logger(name: str) -> logging.Logger:
    """Get a logger instance for the given module name.

    Uses caching to return the same logger instance for repeated calls.

    Args:
        name: The module name, typically __name__

    Returns:
        Configured logger instance

    Example:
        from campaign_client.utils.logging import get_logger
        logger = get_logger(__name__)
        logger.info("This is an info message")
    """
    return logging.getLogger(name)
