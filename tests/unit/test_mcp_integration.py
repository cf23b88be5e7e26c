"""Integration tests for MCP tools using FastMCP Client."""

import pytest
from fastmcp import Client


class TestMCPIntegration:
    """Test MCP tools through FastMCP Client interface."""

    @pytest.mark.asyncio
    async def test_list_tools(self, mcp_client: Client):
        """Test that every tool is exposed."""
        async with mcp_client as client:
            tools = await client.list_tools()

        assert {tool.name for tool in tools} == {
            "lint_scss",
            "lint_scss_file",
            "check_declaration",
            "analyze_selector",
            "parse_class_name",
            "check_declaration_order",
            "list_style_rules",
        }

    @pytest.mark.asyncio
    async def test_lint_scss_tool(self, mcp_client: Client, sample_scss: str):
        """Test lint_scss through MCP client."""
        async with mcp_client as client:
            result = await client.call_tool("lint_scss", {"css_content": sample_scss})

        assert result.data["valid"] is True
        assert result.data["errors"] == []
        assert result.data["stats"]["rule_count"] == 6
        assert "summary" in result.data

    @pytest.mark.asyncio
    async def test_lint_scss_file_tool(self, mcp_client: Client, invalid_scss_file):
        """Test lint_scss_file through MCP client."""
        async with mcp_client as client:
            result = await client.call_tool("lint_scss_file", {"file_path": str(invalid_scss_file)})

        assert result.data["valid"] is False
        assert result.data["errors"][0]["rule"] == "selector-no-id"

    @pytest.mark.asyncio
    async def test_analyze_selector_tool(self, mcp_client: Client):
        """Test analyze_selector through MCP client."""
        async with mcp_client as client:
            result = await client.call_tool("analyze_selector", {"selector": "div.c-card"})

        assert result.data["specificity"] == [0, 1, 1]
        assert result.data["violations"][0]["rule"] == "selector-qualified-type"

    @pytest.mark.asyncio
    async def test_check_declaration_order_tool(self, mcp_client: Client):
        """Test check_declaration_order through MCP client."""
        async with mcp_client as client:
            result = await client.call_tool(
                "check_declaration_order", {"items": ["&:hover", "color"]}
            )

        assert result.data["valid"] is False
        assert result.data["violations"][0]["property"] == "color"
