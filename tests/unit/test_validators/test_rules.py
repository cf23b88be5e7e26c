"""Tests for the rule catalogue and severity resolution."""

from scss_style_mcp.config import RulesConfig
from scss_style_mcp.validators.rules import RULES, Severity, describe_rules, resolve_severity


class TestRuleCatalogue:
    """Test the rule catalogue."""

    def test_categories(self):
        """Test that every rule belongs to a known category."""
        assert {rule.category for rule in RULES.values()} == {
            "selector",
            "declaration",
            "formatting",
        }

    def test_default_severities(self):
        """Test a sample of default severities."""
        assert RULES["selector-no-id"].severity == Severity.ERROR
        assert RULES["selector-no-type"].severity == Severity.WARNING
        assert RULES["declaration-semicolon"].severity == Severity.ERROR
        assert RULES["number-zero-unit"].severity == Severity.WARNING

    def test_describe_rules(self):
        """Test rule descriptions."""
        described = describe_rules()

        assert len(described) == len(RULES)
        assert set(described[0]) == {"rule", "category", "severity", "description"}


class TestResolveSeverity:
    """Test effective severity resolution."""

    def test_defaults(self):
        """Test severities without configuration."""
        assert resolve_severity("selector-no-id") == "error"
        assert resolve_severity("selector-no-type") == "warning"

    def test_strict_mode(self):
        """Test that strict mode promotes warnings only."""
        assert resolve_severity("selector-no-type", strict_mode=True) == "error"
        assert resolve_severity("selector-no-id", strict_mode=True) == "error"

    def test_overrides(self):
        """Test configured severities and disabled rules."""
        config = RulesConfig(
            severity={"selector-no-id": "warning", "number-zero-unit": "off"},
            disabled=["selector-no-type"],
        )

        assert resolve_severity("selector-no-id", config) == "warning"
        assert resolve_severity("number-zero-unit", config) is None
        assert resolve_severity("selector-no-type", config) is None
        assert resolve_severity("selector-no-type", config, strict_mode=True) is None
