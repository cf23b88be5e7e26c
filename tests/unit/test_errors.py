"""Tests for error classes and formatting."""

from scss_style_mcp.utils.errors import (
    StyleMCPError,
    ValidationError,
    StyleViolation,
    ParsingError,
    ToolExecutionError,
    format_validation_errors,
)


class TestErrors:
    """Test error classes."""

    def test_hierarchy(self):
        """Test that every error derives from StyleMCPError."""
        assert issubclass(ValidationError, StyleMCPError)
        assert issubclass(StyleViolation, ValidationError)
        assert issubclass(ParsingError, ValidationError)
        assert issubclass(ToolExecutionError, StyleMCPError)

    def test_style_violation_to_dict(self):
        """Test violation serialisation."""
        violation = StyleViolation(
            "Bare tag selector 'li'",
            rule="selector-no-type",
            severity="warning",
            line=5,
            column=1,
            selector=".c-nav ul li",
        )

        assert violation.to_dict() == {
            "rule": "selector-no-type",
            "severity": "warning",
            "message": "Bare tag selector 'li'",
            "line": 5,
            "column": 1,
            "selector": ".c-nav ul li",
            "property": None,
        }
        assert str(violation) == "Bare tag selector 'li'"


class TestFormatValidationErrors:
    """Test human-readable error formatting."""

    def test_no_errors(self):
        """Test formatting an empty list."""
        assert format_validation_errors([]) == "No errors"

    def test_full_location(self):
        """Test an error with every location field."""
        violation = StyleViolation(
            "Unit on zero value '0px'; write 0",
            rule="number-zero-unit",
            line=6,
            column=10,
            selector=".c-a",
            property_name="margin",
        )

        assert format_validation_errors([violation]) == (
            "Line 6, Column 10, Selector: .c-a, Property: margin: "
            "Unit on zero value '0px'; write 0 [number-zero-unit]"
        )

    def test_message_only(self):
        """Test an error without a location."""
        assert format_validation_errors([ValidationError("File not found: x.scss")]) == (
            "File not found: x.scss"
        )
