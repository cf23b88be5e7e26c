"""Tests for the declaration formatting checker."""

from scss_style_mcp.config import RulesConfig
from scss_style_mcp.validators.formatting_checker import FormattingChecker


def _rules(violations) -> list:
    return [violation.rule for violation in violations]


class TestFormattingChecker:
    """Test cases for declaration formatting."""

    def setup_method(self):
        """Set up test fixtures."""
        self.checker = FormattingChecker()

    def test_well_formatted_declarations(self):
        """Test declarations with no formatting problems."""
        declarations = [
            "color: #fff;",
            "margin: 0;",
            "padding: 0 16px;",
            "transition: opacity 0s;",
            "width: calc(100% - 0px);",
            "margin: 1.0px;",
            'content: "#FFF";',
            "background: url(http://example.com/#FFF);",
            "color: #{$brand};",
            "font-family:\n    Helvetica,\n    sans-serif;",
        ]

        for declaration in declarations:
            assert self.checker.check_declaration(declaration) == [], declaration

    def test_missing_space_after_colon(self):
        """Test that the colon needs one following space."""
        violations = self.checker.check_declaration("color:#fff;")

        assert _rules(violations) == ["declaration-colon-space-after"]
        assert violations[0].severity == "error"
        assert violations[0].property_name == "color"
        assert (violations[0].line, violations[0].column) == (1, 7)

    def test_extra_space_after_colon(self):
        """Test that two spaces after the colon are reported."""
        violations = self.checker.check_declaration("color:  red;")

        assert _rules(violations) == ["declaration-colon-space-after"]

    def test_space_before_colon(self):
        """Test whitespace before the colon."""
        violations = self.checker.check_declaration("color : red;")

        assert _rules(violations) == ["declaration-colon-space-before"]
        assert violations[0].column == 6

    def test_missing_semicolon(self):
        """Test a declaration without a semicolon."""
        violations = self.checker.check_declaration("color: red")

        assert _rules(violations) == ["declaration-semicolon"]
        assert violations[0].column == 11

    def test_space_before_semicolon(self):
        """Test whitespace before the semicolon."""
        violations = self.checker.check_declaration("color: red ;")

        assert _rules(violations) == ["declaration-semicolon-space-before"]
        assert violations[0].column == 11

    def test_zero_with_unit(self):
        """Test that zero lengths carry no unit."""
        violations = self.checker.check_declaration("margin: 0px;")

        assert _rules(violations) == ["number-zero-unit"]
        assert violations[0].severity == "warning"
        assert "0px" in violations[0].message
        assert violations[0].column == 9

        assert _rules(self.checker.check_declaration("margin: 10px 0em;")) == [
            "number-zero-unit"
        ]

    def test_signed_zero_with_unit(self):
        """Test that a sign in front of a zero length does not hide the unit."""
        violations = self.checker.check_declaration("margin: -0px;")

        assert _rules(violations) == ["number-zero-unit"]
        assert "'-0px'" in violations[0].message
        assert violations[0].column == 9

        assert _rules(self.checker.check_declaration("top: +0.0em;")) == ["number-zero-unit"]
        assert self.checker.check_declaration("margin: -10px;") == []

    def test_several_violations(self):
        """Test that independent problems are all reported."""
        violations = self.checker.check_declaration("margin:0px;")

        assert _rules(violations) == ["declaration-colon-space-after", "number-zero-unit"]

    def test_hex_case(self):
        """Test hex colour case."""
        violations = self.checker.check_declaration("color: #FFF;")

        assert _rules(violations) == ["color-hex-case"]
        assert "'#fff'" in violations[0].message

        upper = FormattingChecker(RulesConfig(hex_case="upper"))
        assert _rules(upper.check_declaration("color: #fff;")) == ["color-hex-case"]
        assert upper.check_declaration("color: #FFF;") == []

    def test_hex_length_short(self):
        """Test preferring short hex colours."""
        checker = FormattingChecker(RulesConfig(hex_length="short"))

        violations = checker.check_declaration("color: #ffeedd;")

        assert _rules(violations) == ["color-hex-length"]
        assert "'#fed'" in violations[0].message
        assert checker.check_declaration("color: #123456;") == []

    def test_hex_length_long(self):
        """Test preferring long hex colours."""
        checker = FormattingChecker(RulesConfig(hex_length="long"))

        violations = checker.check_declaration("color: #fff;")

        assert _rules(violations) == ["color-hex-length"]
        assert "'#ffffff'" in violations[0].message

    def test_hex_length_off_by_default(self):
        """Test that either length is accepted by default."""
        assert self.checker.check_declaration("color: #ffffff;") == []
        assert self.checker.check_declaration("color: #fff;") == []

    def test_trailing_whitespace(self):
        """Test trailing whitespace inside a multi-line declaration."""
        violations = self.checker.check_declaration(
            "box-shadow: 0 0 1px red, \n    0 1px 2px blue;"
        )

        assert _rules(violations) == ["whitespace-trailing"]
        assert (violations[0].line, violations[0].column) == (1, 25)

    def test_absolute_positions(self):
        """Test that positions are offset by the declaration's location."""
        violations = self.checker.check_declaration("color:red;", line=10, column=5)

        assert (violations[0].line, violations[0].column) == (10, 11)

    def test_not_a_declaration(self):
        """Test text without a colon."""
        assert self.checker.check_declaration("foo") == []

    def test_strict_mode(self):
        """Test that strict mode promotes warnings."""
        checker = FormattingChecker(strict_mode=True)

        violations = checker.check_declaration("color: #FFF;")

        assert violations[0].severity == "error"

    def test_disabled_rule(self):
        """Test that disabled rules are skipped."""
        checker = FormattingChecker(RulesConfig(disabled=["number-zero-unit"]))

        assert checker.check_declaration("margin: 0px;") == []
