"""Utility modules for SCSS Style MCP Server."""

from .errors import (
    StyleMCPError,
    ValidationError,
    StyleViolation,
    ParsingError,
    ConfigurationError,
)
from .logging_config import setup_logging
from .cache import LRUCache

__all__ = [
    "StyleMCPError",
    "ValidationError",
    "StyleViolation",
    "ParsingError",
    "ConfigurationError",
    "setup_logging",
    "LRUCache",
]
