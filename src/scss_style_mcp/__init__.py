"""SCSS Style MCP Server - style-guide linter for BEM-named, namespaced (S)CSS."""

__version__ = "0.1.0"

from .server import create_server

__all__ = ["create_server", "__version__"]
