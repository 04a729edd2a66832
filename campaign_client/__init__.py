"""Campaign import and report client."""

__version__ = "0.1.0"
