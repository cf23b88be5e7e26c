"""MCP tool implementations for SCSS Style MCP Server."""

from .lint_tools import register_lint_tools
from .analysis_tools import register_analysis_tools

__all__ = [
    "register_lint_tools",
    "register_analysis_tools",
]
