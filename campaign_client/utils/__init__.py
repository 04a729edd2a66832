"""Utility modules for the client."""

from campaign_client.utils.formatting import TimestampStyle, format_timestamp
from campaign_client.utils.logging import configure_logging, get_logger

__all__ = ["TimestampStyle", "configure_logging", "format_timestamp", "get_logger"]
