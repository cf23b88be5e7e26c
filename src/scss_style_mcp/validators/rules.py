"""Catalogue of style-guide rules and their default severities."""

from enum import Enum
from typing import Dict, List, Optional
from dataclasses import dataclass

from ..config import RulesConfig


class Severity(str, Enum):
    """Severity of a rule violation."""

    ERROR = "error"
    WARNING = "warning"
    OFF = "off"


@dataclass(frozen=True)
class RuleDefinition:
    """A single checkable convention."""

    rule_id: str
    category: str
    severity: Severity
    description: str


_DEFINITIONS: List[RuleDefinition] = [
    # Selectors
    RuleDefinition(
        "selector-no-id",
        "selector",
        Severity.ERROR,
        "IDs are never used in selectors; use a class instead",
    ),
    RuleDefinition(
        "selector-no-type",
        "selector",
        Severity.WARNING,
        "Bare tag selectors leak styles; target a class instead",
    ),
    RuleDefinition(
        "selector-qualified-type",
        "selector",
        Severity.WARNING,
        "Classes and IDs are not qualified with a tag (div.c-card)",
    ),
    RuleDefinition(
        "selector-class-pattern",
        "selector",
        Severity.ERROR,
        "Class names follow BEM: block__element--modifier in lowercase-hyphenated words",
    ),
    RuleDefinition(
        "selector-namespace",
        "selector",
        Severity.WARNING,
        "Class names carry a namespace prefix conveying their role (c-, o-, u-, ...)",
    ),
    RuleDefinition(
        "selector-no-js-hooks",
        "selector",
        Severity.ERROR,
        "js- classes are JavaScript hooks and are never styled",
    ),
    RuleDefinition(
        "selector-max-nesting-depth",
        "selector",
        Severity.WARNING,
        "Rules are not nested deeper than the configured depth",
    ),
    RuleDefinition(
        "selector-no-duplicate",
        "selector",
        Severity.WARNING,
        "A selector is declared in one rule only",
    ),
    # Declarations
    RuleDefinition(
        "declaration-order",
        "declaration",
        Severity.WARNING,
        "Rule contents follow the group order: at-rules, box model, typography, "
        "stylistic, UI, pseudo-elements, pseudo-selectors, modifiers, nested elements",
    ),
    RuleDefinition(
        "declaration-no-duplicate",
        "declaration",
        Severity.WARNING,
        "A property is declared once per rule",
    ),
    RuleDefinition(
        "declaration-no-important",
        "declaration",
        Severity.WARNING,
        "!important is reserved for utility classes",
    ),
    RuleDefinition(
        "block-no-empty",
        "declaration",
        Severity.WARNING,
        "Rules are never empty",
    ),
    # Formatting
    RuleDefinition(
        "declaration-colon-space-before",
        "formatting",
        Severity.ERROR,
        "No whitespace before the colon of a declaration",
    ),
    RuleDefinition(
        "declaration-colon-space-after",
        "formatting",
        Severity.ERROR,
        "Exactly one space after the colon of a declaration",
    ),
    RuleDefinition(
        "declaration-semicolon",
        "formatting",
        Severity.ERROR,
        "Every declaration ends with a semicolon",
    ),
    RuleDefinition(
        "declaration-semicolon-space-before",
        "formatting",
        Severity.ERROR,
        "No whitespace before the semicolon of a declaration",
    ),
    RuleDefinition(
        "number-zero-unit",
        "formatting",
        Severity.WARNING,
        "Zero lengths are written without a unit",
    ),
    RuleDefinition(
        "color-hex-case",
        "formatting",
        Severity.WARNING,
        "Hex colours use a consistent case (lowercase by default)",
    ),
    RuleDefinition(
        "color-hex-length",
        "formatting",
        Severity.WARNING,
        "Hex colours use the configured short or long form",
    ),
    RuleDefinition(
        "whitespace-trailing",
        "formatting",
        Severity.WARNING,
        "Lines carry no trailing whitespace",
    ),
]

RULES: Dict[str, RuleDefinition] = {rule.rule_id: rule for rule in _DEFINITIONS}


def resolve_severity(
    rule_id: str, config: Optional[RulesConfig] = None, strict_mode: bool = False
) -> Optional[str]:
    """
    Work out the effective severity of a rule.

    Returns None when the rule is switched off. In strict mode warnings are
    promoted to errors.
    """
    definition = RULES.get(rule_id)
    severity = definition.severity.value if definition else Severity.ERROR.value

    if config is not None:
        if rule_id in config.disabled:
            return None
        severity = config.severity.get(rule_id, severity)

    if severity == Severity.OFF.value:
        return None
    if strict_mode and severity == Severity.WARNING.value:
        return Severity.ERROR.value
    return severity


def describe_rules(config: Optional[RulesConfig] = None) -> List[Dict[str, Optional[str]]]:
    """List every rule with its effective severity."""
    return [
        {
            "rule": rule.rule_id,
            "category": rule.category,
            "severity": resolve_severity(rule.rule_id, config) or Severity.OFF.value,
            "description": rule.description,
        }
        for rule in _DEFINITIONS
    ]
