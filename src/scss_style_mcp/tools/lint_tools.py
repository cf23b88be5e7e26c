"""MCP tools for linting SCSS against the style guide."""

import time
from typing import Dict, Any, Optional

from ..validators.style_linter import StyleLinter, LintResult
from ..validators.formatting_checker import FormattingChecker
from ..config import StyleMCPConfig
from ..utils.logging_config import log_tool_execution, log_tool_completion, get_logger
from ..utils.errors import ToolExecutionError, ValidationError, StyleViolation


def serialize_error(error: ValidationError) -> Dict[str, Any]:
    """Convert an error or violation to the MCP response format."""
    if isinstance(error, StyleViolation):
        return error.to_dict()
    return {
        "rule": None,
        "severity": "error",
        "message": error.message,
        "line": error.line,
        "column": error.column,
        "selector": error.selector,
        "property": error.property_name,
    }


def lint_result_to_dict(result: LintResult) -> Dict[str, Any]:
    """Convert a LintResult to the MCP response format."""
    return {
        "valid": result.valid,
        "errors": [serialize_error(error) for error in result.errors],
        "warnings": [serialize_error(warning) for warning in result.warnings],
        "suggestions": result.suggestions,
        "summary": result.summary,
        "stats": {
            "parse_time_ms": result.parse_time_ms,
            "rule_count": result.rule_count,
            "selector_count": result.selector_count,
        },
    }


def register_lint_tools(mcp: Any, config: StyleMCPConfig) -> None:
    """Register all lint tools with the MCP server."""

    linter = StyleLinter(config.validators, config.rules, config.performance)

    logger = get_logger("lint_tools")

    @mcp.tool()
    async def lint_scss(
        css_content: str,
        filename: Optional[str] = None,
        strict_mode: bool = False,
    ) -> Dict[str, Any]:
        """
        Lint SCSS content against the style guide.

        Args:
            css_content: The SCSS content to lint
            filename: Optional filename for error reporting
            strict_mode: Treat warnings as errors

        Returns:
            Dictionary with lint results
        """
        start_time = time.time()
        tool_name = "lint_scss"

        try:
            log_tool_execution(
                tool_name,
                {
                    "css_length": len(css_content),
                    "filename": filename,
                    "strict_mode": strict_mode,
                },
            )

            # Override linter config if needed
            if strict_mode != linter.strict_mode:
                linter.strict_mode = strict_mode

            result = linter.lint(css_content, filename)
            response = lint_result_to_dict(result)

            duration = time.time() - start_time
            log_tool_completion(tool_name, True, duration)

            return response

        except Exception as e:
            duration = time.time() - start_time
            error_msg = f"SCSS lint failed: {str(e)}"
            log_tool_completion(tool_name, False, duration, error_msg)
            raise ToolExecutionError(tool_name, error_msg)

    @mcp.tool()
    async def lint_scss_file(file_path: str, strict_mode: bool = False) -> Dict[str, Any]:
        """
        Lint an SCSS file.

        Args:
            file_path: Path to the SCSS file
            strict_mode: Treat warnings as errors

        Returns:
            Dictionary with lint results
        """
        start_time = time.time()
        tool_name = "lint_scss_file"

        try:
            log_tool_execution(tool_name, {"file_path": file_path, "strict_mode": strict_mode})

            if strict_mode != linter.strict_mode:
                linter.strict_mode = strict_mode

            result = linter.lint_file(file_path)
            response = lint_result_to_dict(result)

            duration = time.time() - start_time
            log_tool_completion(tool_name, True, duration)

            return response

        except Exception as e:
            duration = time.time() - start_time
            error_msg = f"File lint failed: {str(e)}"
            log_tool_completion(tool_name, False, duration, error_msg)
            raise ToolExecutionError(tool_name, error_msg)

    @mcp.tool()
    async def check_declaration(declaration: str) -> Dict[str, Any]:
        """
        Check the formatting of a single declaration.

        Args:
            declaration: Declaration as written, e.g. "margin:0px;"

        Returns:
            Dictionary with formatting violations
        """
        start_time = time.time()
        tool_name = "check_declaration"

        try:
            log_tool_execution(tool_name, {"declaration": declaration})

            checker = FormattingChecker(config.rules, linter.strict_mode)
            violations = checker.check_declaration(declaration)

            response = {
                "valid": not any(v.severity == "error" for v in violations),
                "declaration": declaration,
                "violations": [v.to_dict() for v in violations],
            }

            duration = time.time() - start_time
            log_tool_completion(tool_name, True, duration)

            return response

        except Exception as e:
            duration = time.time() - start_time
            error_msg = f"Declaration check failed: {str(e)}"
            log_tool_completion(tool_name, False, duration, error_msg)
            raise ToolExecutionError(tool_name, error_msg)

    logger.info("Registered lint tools: lint_scss, lint_scss_file, check_declaration")
