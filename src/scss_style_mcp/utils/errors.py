"""Custom error classes for SCSS Style MCP Server."""

from typing import Optional, Dict, Any, List


class StyleMCPError(Exception):
    """Base exception class for SCSS Style MCP Server."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ValidationError(StyleMCPError):
    """Exception raised when stylesheet validation fails."""

    def __init__(
        self,
        message: str,
        line: Optional[int] = None,
        column: Optional[int] = None,
        selector: Optional[str] = None,
        property_name: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message, details)
        self.line = line
        self.column = column
        self.selector = selector
        self.property_name = property_name


class StyleViolation(ValidationError):
    """A single style-guide rule violation."""

    def __init__(
        self,
        message: str,
        rule: str,
        severity: str = "error",
        line: Optional[int] = None,
        column: Optional[int] = None,
        selector: Optional[str] = None,
        property_name: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message, line, column, selector, property_name, details)
        self.rule = rule
        self.severity = severity

    def to_dict(self) -> Dict[str, Any]:
        return {
            "rule": self.rule,
            "severity": self.severity,
            "message": self.message,
            "line": self.line,
            "column": self.column,
            "selector": self.selector,
            "property": self.property_name,
        }


class ConfigurationError(StyleMCPError):
    """Exception raised when configuration is invalid."""

    pass


class ToolExecutionError(StyleMCPError):
    """Exception raised when MCP tool execution fails."""

    def __init__(self, tool_name: str, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details)
        self.tool_name = tool_name


class ParsingError(ValidationError):
    """Exception raised when SCSS source cannot be split into rules."""

    pass


class SelectorError(ValidationError):
    """Exception raised when selector analysis fails."""

    pass


def format_validation_errors(errors: List[ValidationError]) -> str:
    """Format a list of validation errors into a readable string."""
    if not errors:
        return "No errors"

    formatted_errors = []
    for error in errors:
        parts = []

        if error.line is not None:
            parts.append(f"Line {error.line}")
            if error.column is not None:
                parts.append(f"Column {error.column}")

        if error.selector:
            parts.append(f"Selector: {error.selector}")

        if error.property_name:
            parts.append(f"Property: {error.property_name}")

        message = error.message
        if isinstance(error, StyleViolation):
            message = f"{message} [{error.rule}]"

        location = ", ".join(parts)
        if location:
            formatted_errors.append(f"{location}: {message}")
        else:
            formatted_errors.append(message)

    return "\n".join(formatted_errors)
