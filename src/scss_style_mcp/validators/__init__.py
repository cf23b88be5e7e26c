"""Style-guide checking components for SCSS Style MCP Server."""

from .selector_analyzer import (
    SelectorAnalyzer,
    SelectorAnalysis,
    BemName,
    calculate_specificity,
    resolve_selector,
    split_selector_list,
)
from .declaration_order import (
    DeclarationOrderChecker,
    DeclarationGroup,
    OrderItem,
    classify_property,
    classify_selector,
)
from .formatting_checker import FormattingChecker
from .scss_parser import parse_scss, Stylesheet, StyleRule, AtBlock, RuleItem
from .style_linter import StyleLinter, LintResult
from .rules import RULES, Severity, resolve_severity, describe_rules

__all__ = [
    "SelectorAnalyzer",
    "SelectorAnalysis",
    "BemName",
    "calculate_specificity",
    "resolve_selector",
    "split_selector_list",
    "DeclarationOrderChecker",
    "DeclarationGroup",
    "OrderItem",
    "classify_property",
    "classify_selector",
    "FormattingChecker",
    "parse_scss",
    "Stylesheet",
    "StyleRule",
    "AtBlock",
    "RuleItem",
    "StyleLinter",
    "LintResult",
    "RULES",
    "Severity",
    "resolve_severity",
    "describe_rules",
]
