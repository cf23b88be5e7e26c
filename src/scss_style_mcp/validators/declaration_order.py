"""Declaration order checker for the contents of a rule."""

import re
from enum import IntEnum
from typing import List, Optional, Sequence, Tuple, Union, Dict, Any
from dataclasses import dataclass

from ..config import RulesConfig
from ..utils.errors import StyleViolation
from ..utils.logging_config import LoggerMixin
from .rules import resolve_severity
from .selector_analyzer import split_selector_list, LEGACY_PSEUDO_ELEMENTS


class DeclarationGroup(IntEnum):
    """Groups in the order they must appear inside a rule."""

    AT_RULES = 1
    BOX_MODEL = 2
    TYPOGRAPHY = 3
    STYLISTIC = 4
    UI = 5
    PSEUDO_ELEMENTS = 6
    PSEUDO_SELECTORS = 7
    MODIFIERS = 8
    NESTED_ELEMENTS = 9

    @property
    def label(self) -> str:
        return GROUP_LABELS[self]


GROUP_LABELS: Dict[DeclarationGroup, str] = {
    DeclarationGroup.AT_RULES: "at-rules",
    DeclarationGroup.BOX_MODEL: "box model",
    DeclarationGroup.TYPOGRAPHY: "typography",
    DeclarationGroup.STYLISTIC: "stylistic",
    DeclarationGroup.UI: "UI",
    DeclarationGroup.PSEUDO_ELEMENTS: "pseudo-elements",
    DeclarationGroup.PSEUDO_SELECTORS: "pseudo-selectors",
    DeclarationGroup.MODIFIERS: "modifiers",
    DeclarationGroup.NESTED_ELEMENTS: "nested elements",
}

_VENDOR_PREFIX = re.compile(r"^-(?:webkit|moz|ms|o)-")

# Exact property names per group
_PROPERTIES: Dict[DeclarationGroup, set] = {
    DeclarationGroup.BOX_MODEL: {
        "display",
        "position",
        "top",
        "right",
        "bottom",
        "left",
        "inset",
        "z-index",
        "float",
        "clear",
        "box-sizing",
        "width",
        "height",
        "min-width",
        "min-height",
        "max-width",
        "max-height",
        "inline-size",
        "block-size",
        "order",
        "columns",
        "gap",
        "table-layout",
        "object-fit",
        "object-position",
        "aspect-ratio",
        "contain",
    },
    DeclarationGroup.TYPOGRAPHY: {
        "color",
        "line-height",
        "letter-spacing",
        "word-spacing",
        "white-space",
        "word-break",
        "word-wrap",
        "overflow-wrap",
        "vertical-align",
        "hyphens",
        "direction",
        "quotes",
        "content",
        "tab-size",
        "unicode-bidi",
        "writing-mode",
    },
    DeclarationGroup.STYLISTIC: {
        "box-shadow",
        "text-shadow",
        "opacity",
        "filter",
        "backdrop-filter",
        "mix-blend-mode",
        "clip-path",
        "fill",
        "stroke",
        "visibility",
        "isolation",
        "perspective",
    },
    DeclarationGroup.UI: {
        "cursor",
        "pointer-events",
        "user-select",
        "resize",
        "appearance",
        "touch-action",
        "scroll-behavior",
        "will-change",
        "caret-color",
        "accent-color",
    },
}

# Property families matched by prefix ("margin" matches "margin-top")
_FAMILIES: Dict[DeclarationGroup, tuple] = {
    DeclarationGroup.BOX_MODEL: (
        "margin",
        "padding",
        "border",
        "overflow",
        "flex",
        "grid",
        "align",
        "justify",
        "place",
        "inset",
        "column",
        "row",
    ),
    DeclarationGroup.TYPOGRAPHY: ("font", "text", "list-style"),
    DeclarationGroup.STYLISTIC: (
        "background",
        "outline",
        "transform",
        "transition",
        "animation",
        "mask",
        "stroke",
    ),
    DeclarationGroup.UI: ("scroll-snap", "scrollbar"),
}


@dataclass
class OrderItem:
    """One entry of a rule body as seen by the order checker."""

    kind: str  # 'property', 'at-rule' or 'selector'
    name: str
    line: Optional[int] = None
    column: Optional[int] = None

    @classmethod
    def from_text(cls, text: str) -> "OrderItem":
        """
        Interpret a bare string.

        "@..." is an at-rule, anything starting with a selector character is a
        nested selector, everything else is a property name. A nested tag must
        carry "&" or a combinator ("& p"); a bare "p" is read as a property.
        """
        text = text.strip()
        if text.startswith("@"):
            return cls("at-rule", text)
        if text and (text[0] in "&.:#[%*>+~" or " " in text):
            return cls("selector", text)
        return cls("property", text)


def classify_property(name: str) -> Optional[DeclarationGroup]:
    """Return the group of a CSS property, or None when it takes no part in ordering."""
    name = name.strip().lower()
    if not name or name.startswith(("$", "--")):
        return None

    name = _VENDOR_PREFIX.sub("", name)

    # Radii look like border properties but are stylistic
    if name.startswith("border") and name.endswith("-radius"):
        return DeclarationGroup.STYLISTIC

    for group, names in _PROPERTIES.items():
        if name in names:
            return group

    for group, families in _FAMILIES.items():
        for family in families:
            if name == family or name.startswith(family + "-"):
                return group

    return None


def classify_selector(selector: str, state_prefixes: Sequence[str] = ("is-", "has-")) -> DeclarationGroup:
    """Return the group of a selector nested inside a rule."""
    parts = split_selector_list(selector)
    first = parts[0] if parts else selector.strip()

    if first.startswith(("&::", "::")):
        return DeclarationGroup.PSEUDO_ELEMENTS
    if first.startswith(("&:", ":")):
        pseudo = re.match(r"^&?:([\w-]+)", first)
        if pseudo and pseudo.group(1).lower() in LEGACY_PSEUDO_ELEMENTS:
            return DeclarationGroup.PSEUDO_ELEMENTS
        return DeclarationGroup.PSEUDO_SELECTORS
    if first.startswith("&--"):
        return DeclarationGroup.MODIFIERS
    if first.startswith("&."):
        class_name = re.match(r"^&\.([\w-]+)", first)
        if class_name and (
            class_name.group(1).startswith(tuple(state_prefixes)) or "--" in class_name.group(1)
        ):
            return DeclarationGroup.MODIFIERS
    return DeclarationGroup.NESTED_ELEMENTS


class DeclarationOrderChecker(LoggerMixin):
    """Verifies that rule contents follow the prescribed group ordering."""

    def __init__(self, rules: Optional[RulesConfig] = None, strict_mode: bool = False):
        self.rules = rules or RulesConfig()
        self.strict_mode = strict_mode
        self._state_prefixes = tuple(
            prefix for prefix, role in self.rules.namespaces.items() if role == "state"
        ) or ("is-", "has-")

    def classify_item(self, item: Union[str, OrderItem]) -> Optional[DeclarationGroup]:
        """Return the group of a rule body item (None when it is not ordered)."""
        if isinstance(item, str):
            item = OrderItem.from_text(item)

        if item.kind == "at-rule":
            return DeclarationGroup.AT_RULES
        if item.kind == "selector":
            return classify_selector(item.name, self._state_prefixes)
        return classify_property(item.name)

    def check_order(self, items: Sequence[Union[str, OrderItem]]) -> List[StyleViolation]:
        """
        Check that items appear in non-decreasing group order.

        Args:
            items: Property names, at-rule statements or nested selectors in
                source order

        Returns:
            One violation per item that appears after a later group
        """
        severity = resolve_severity("declaration-order", self.rules, self.strict_mode)
        if severity is None:
            return []

        violations: List[StyleViolation] = []
        seen: List[Tuple[OrderItem, DeclarationGroup]] = []

        for raw_item in items:
            item = OrderItem.from_text(raw_item) if isinstance(raw_item, str) else raw_item
            group = self.classify_item(item)
            if group is None:
                continue

            earlier = next(
                ((prior, prior_group) for prior, prior_group in seen if prior_group > group),
                None,
            )
            if earlier is not None:
                prior, prior_group = earlier
                violations.append(
                    StyleViolation(
                        f"'{item.name}' ({group.label}) should come before "
                        f"'{prior.name}' ({prior_group.label})",
                        rule="declaration-order",
                        severity=severity,
                        line=item.line,
                        column=item.column,
                        property_name=item.name if item.kind == "property" else None,
                        selector=item.name if item.kind == "selector" else None,
                    )
                )
            seen.append((item, group))

        return violations

    def check_duplicates(self, items: Sequence[Union[str, OrderItem]]) -> List[StyleViolation]:
        """Report properties declared more than once."""
        severity = resolve_severity("declaration-no-duplicate", self.rules, self.strict_mode)
        if severity is None:
            return []

        violations: List[StyleViolation] = []
        seen_properties = set()
        for raw_item in items:
            item = OrderItem.from_text(raw_item) if isinstance(raw_item, str) else raw_item
            if item.kind != "property":
                continue
            name = item.name.lower()
            if name in seen_properties:
                violations.append(
                    StyleViolation(
                        f"Duplicate property: {item.name}",
                        rule="declaration-no-duplicate",
                        severity=severity,
                        line=item.line,
                        column=item.column,
                        property_name=item.name,
                    )
                )
            seen_properties.add(name)
        return violations

    def describe(self, items: Sequence[Union[str, OrderItem]]) -> List[Dict[str, Any]]:
        """Classify each item for reporting."""
        described = []
        for raw_item in items:
            item = OrderItem.from_text(raw_item) if isinstance(raw_item, str) else raw_item
            group = self.classify_item(item)
            described.append(
                {
                    "item": item.name,
                    "kind": item.kind,
                    "group": group.label if group else None,
                    "rank": int(group) if group else None,
                }
            )
        return described
