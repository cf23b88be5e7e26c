"""Pytest configuration and fixtures for SCSS Style MCP Server tests."""

import pytest
import tempfile
import os
from pathlib import Path
from typing import Generator

from fastmcp import Client

from scss_style_mcp.config import StyleMCPConfig, ValidatorConfig
from scss_style_mcp.validators.style_linter import StyleLinter
from scss_style_mcp.validators.selector_analyzer import SelectorAnalyzer
from scss_style_mcp.validators.declaration_order import DeclarationOrderChecker
from scss_style_mcp.validators.formatting_checker import FormattingChecker
from scss_style_mcp.server import StyleMCPServer


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmp_dir:
        yield Path(tmp_dir)


@pytest.fixture
def sample_scss() -> str:
    """SCSS that follows every convention."""
    return """// Card component
.c-card {
  @include clearfix;
  display: block;
  padding: 0 16px;
  font-size: 14px;
  color: #333;
  background-color: #fff;
  cursor: pointer;

  &::before {
    content: "";
  }

  &:hover {
    background-color: #f5f5f5;
  }

  &--featured {
    border-color: #c00;
  }

  &__title {
    margin: 0;
    font-weight: bold;
  }
}

.u-hidden {
  display: none !important;
}
"""


@pytest.fixture
def invalid_scss() -> str:
    """SCSS breaking selector, ordering and formatting conventions."""
    return """#header {
  color: #FFF;
}

.c-nav ul li {
  margin:0px;
}

.navBar {
  font-size: 12px;
  display: block
}
"""


@pytest.fixture
def test_config() -> StyleMCPConfig:
    """Test configuration."""
    return StyleMCPConfig(
        validators=ValidatorConfig(
            strict_mode=False,
            cache_enabled=False,  # Disable cache for tests
            max_file_size=1024 * 1024,  # 1MB
        )
    )


@pytest.fixture
def style_linter(test_config: StyleMCPConfig) -> StyleLinter:
    """Style linter instance for testing."""
    return StyleLinter(test_config.validators, test_config.rules, test_config.performance)


@pytest.fixture
def selector_analyzer() -> SelectorAnalyzer:
    """Selector analyzer instance for testing."""
    return SelectorAnalyzer()


@pytest.fixture
def order_checker() -> DeclarationOrderChecker:
    """Declaration order checker instance for testing."""
    return DeclarationOrderChecker()


@pytest.fixture
def formatting_checker() -> FormattingChecker:
    """Formatting checker instance for testing."""
    return FormattingChecker()


@pytest.fixture
def sample_scss_file(temp_dir: Path, sample_scss: str) -> Path:
    """Create a temporary SCSS file with compliant content."""
    scss_file = temp_dir / "card.scss"
    scss_file.write_text(sample_scss)
    return scss_file


@pytest.fixture
def invalid_scss_file(temp_dir: Path, invalid_scss: str) -> Path:
    """Create a temporary SCSS file with violations."""
    scss_file = temp_dir / "invalid.scss"
    scss_file.write_text(invalid_scss)
    return scss_file


# FastMCP Server fixtures
@pytest.fixture
def mcp_server(test_config: StyleMCPConfig) -> StyleMCPServer:
    """Create a StyleMCPServer instance for testing."""
    return StyleMCPServer(test_config)


@pytest.fixture
def mcp_client(mcp_server: StyleMCPServer) -> Client:
    """Create a FastMCP Client connected to the test server."""
    # Return the client directly for use with async with in tests
    return Client(mcp_server.mcp)


@pytest.fixture(autouse=True)
def setup_test_environment():
    """Set up test environment variables."""
    # Store original environment
    original_env = os.environ.copy()

    # Set test environment variables
    os.environ["LOG_LEVEL"] = "CRITICAL"  # Reduce log noise in tests

    yield

    # Restore original environment
    os.environ.clear()
    os.environ.update(original_env)
