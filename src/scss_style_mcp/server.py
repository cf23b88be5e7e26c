"""FastMCP server exposing the SCSS style-guide tools."""

import argparse
import asyncio
import os
import sys
from typing import Optional, Any, Sequence

from fastmcp import FastMCP

from scss_style_mcp import __version__
from scss_style_mcp.config import load_config, StyleMCPConfig
from scss_style_mcp.utils.logging_config import setup_logging, get_logger
from scss_style_mcp.utils.errors import ConfigurationError
from scss_style_mcp.tools.lint_tools import register_lint_tools
from scss_style_mcp.tools.analysis_tools import register_analysis_tools

INSTRUCTIONS = (
    "Lints SCSS against a BEM and namespacing style guide. Use lint_scss or "
    "lint_scss_file for whole stylesheets, analyze_selector and parse_class_name "
    "for naming questions, check_declaration and check_declaration_order for "
    "single declarations or rule bodies, and list_style_rules for the rule catalogue."
)


class StyleMCPServer:
    """Owns the FastMCP instance and its tool registrations."""

    def __init__(self, config: StyleMCPConfig):
        self.config = config
        self.logger = get_logger("server")

        self.mcp: Any = FastMCP(
            name="SCSSStyleMCP",
            instructions=INSTRUCTIONS,
            version=__version__,
        )
        self._register_tools()

        self.logger.info(
            "SCSS Style MCP Server ready",
            extra={"strict_mode": config.validators.strict_mode, "event": "server_ready"},
        )

    def _register_tools(self) -> None:
        groups = (("lint", register_lint_tools), ("analysis", register_analysis_tools))
        for group, register in groups:
            try:
                register(self.mcp, self.config)
            except Exception as e:
                self.logger.error(f"Failed to register {group} tools: {e}")
                raise ConfigurationError(
                    f"Tool registration failed: {e}", details={"group": group}
                )
            self.logger.debug(f"Registered {group} tools")

    async def start(self) -> None:
        """Serve over stdio until the client disconnects."""
        self.logger.info("Starting SCSS Style MCP Server")
        try:
            await self.mcp.run_async()
        except Exception as e:
            self.logger.error(f"Server failed: {e}")
            raise

    def run(self) -> None:
        """Blocking wrapper around start(); exits with status 1 on failure."""
        try:
            asyncio.run(self.start())
        except KeyboardInterrupt:
            self.logger.info("Server stopped by user")
        except Exception as e:
            self.logger.error(f"Server error: {e}")
            sys.exit(1)


def create_server(config_path: Optional[str] = None) -> StyleMCPServer:
    """
    Load configuration, set up logging and build the server.

    Exits the process with status 1 when configuration or registration fails.
    """
    try:
        config = load_config(config_path)
        setup_logging(config.logging)
        return StyleMCPServer(config)
    except Exception as e:
        print(f"Failed to create server: {e}", file=sys.stderr)
        sys.exit(1)


def main(argv: Optional[Sequence[str]] = None) -> None:
    """Entry point for the scss-style-mcp command."""
    parser = argparse.ArgumentParser(
        prog="scss-style-mcp", description="SCSS style-guide MCP server"
    )
    parser.add_argument("--config", "-c", type=str, help="Path to configuration file")
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level (overrides the configuration file)",
    )
    parser.add_argument("--version", action="version", version=__version__)
    args = parser.parse_args(argv)

    # Picked up by load_config as an environment override
    if args.log_level:
        os.environ["LOG_LEVEL"] = args.log_level

    create_server(args.config).run()


if __name__ == "__main__":
    main()
