"""Selector analysis: BEM class names, namespaces, specificity and nesting."""

import re
from typing import List, Optional, Tuple, Dict, Any, Sequence
from dataclasses import dataclass, field

from ..config import RulesConfig
from ..utils.errors import StyleViolation
from ..utils.logging_config import LoggerMixin
from .rules import resolve_severity


_INTERPOLATION = re.compile(r"#\{[^}]*\}")
# Interpolation opening a compound stands for an unknown element, not a tag
_LEADING_INTERPOLATION = re.compile(r"(?<![\w\\.#%&-])#\{[^}]*\}")
_KEYFRAME_STOPS = ("from", "to")
_QUOTED = re.compile(r"\"(?:\\.|[^\"\\])*\"|'(?:\\.|[^'\\])*'")
_NAME = re.compile(r"(?:\\.|[\w-])+")
_BEM_WORD = r"[a-z0-9]+(?:-[a-z0-9]+)*"
_BEM_PATTERN = re.compile(
    rf"^(?P<block>{_BEM_WORD})(?:__(?P<element>{_BEM_WORD}))?(?:--(?P<modifier>{_BEM_WORD}))?$"
)

# Pseudo-elements still written with a single colon
LEGACY_PSEUDO_ELEMENTS = {"before", "after", "first-line", "first-letter"}

# Functional pseudo-classes whose specificity is that of their argument
_ARGUMENT_PSEUDOS = {"not", "is", "has", "matches", "-moz-any", "-webkit-any"}
_ZERO_PSEUDOS = {"where"}

_COMBINATORS = ">+~"

Specificity = Tuple[int, int, int]


@dataclass
class BemName:
    """A class name split into namespace and BEM parts."""

    raw: str
    namespace: Optional[str] = None
    role: Optional[str] = None
    block: Optional[str] = None
    element: Optional[str] = None
    modifier: Optional[str] = None
    valid: bool = True
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "class_name": self.raw,
            "namespace": self.namespace,
            "role": self.role,
            "block": self.block,
            "element": self.element,
            "modifier": self.modifier,
            "valid": self.valid,
            "error": self.error,
        }


@dataclass
class SelectorAnalysis:
    """Result of analysing one selector (or selector list)."""

    selector: str
    selector_type: str
    specificity: Specificity
    depth: int
    classes: List[BemName] = field(default_factory=list)
    ids: List[str] = field(default_factory=list)
    type_selectors: List[str] = field(default_factory=list)
    violations: List[StyleViolation] = field(default_factory=list)

    @property
    def specificity_score(self) -> int:
        return sum(self.specificity)


@dataclass
class _Compound:
    """Simple selectors sharing one compound (no combinator between them)."""

    text: str
    types: List[str] = field(default_factory=list)
    classes: List[str] = field(default_factory=list)
    ids: List[str] = field(default_factory=list)
    attributes: int = 0
    pseudo_classes: List[Tuple[str, Optional[str]]] = field(default_factory=list)
    pseudo_elements: List[str] = field(default_factory=list)
    parent: bool = False
    placeholder: bool = False
    universal: bool = False
    inner: List["_Compound"] = field(default_factory=list)


def _mask(selector: str) -> str:
    """Neutralise interpolation and quoted strings before scanning."""
    selector = _LEADING_INTERPOLATION.sub("*", selector)
    selector = _INTERPOLATION.sub("x", selector)
    return _QUOTED.sub('""', selector)


def _closing(text: str, start: int, opening: str, closing: str) -> int:
    """Index of the bracket closing the one at ``start`` (or len(text))."""
    depth = 0
    for index in range(start, len(text)):
        if text[index] == opening:
            depth += 1
        elif text[index] == closing:
            depth -= 1
            if depth == 0:
                return index
    return len(text)


def split_selector_list(selector: str) -> List[str]:
    """Split a selector list on top-level commas only."""
    parts: List[str] = []
    current: List[str] = []
    depth = 0
    quote: Optional[str] = None
    index = 0

    while index < len(selector):
        char = selector[index]
        if quote:
            if char == "\\" and index + 1 < len(selector):
                current.append(selector[index : index + 2])
                index += 2
                continue
            if char == quote:
                quote = None
        elif char in "\"'":
            quote = char
        elif char in "([{":
            depth += 1
        elif char in ")]}":
            depth = max(0, depth - 1)
        elif char == "," and depth == 0:
            parts.append("".join(current).strip())
            current = []
            index += 1
            continue
        current.append(char)
        index += 1

    parts.append("".join(current).strip())
    return [part for part in parts if part]


def resolve_selector(selector: str, parents: Optional[Sequence[str]] = None) -> List[str]:
    """
    Resolve Sass parent references against the enclosing selectors.

    ``&`` is replaced by each parent; a selector without ``&`` becomes a
    descendant of each parent.
    """
    parts = split_selector_list(selector)
    if not parents:
        return parts

    resolved = []
    for parent in parents:
        for part in parts:
            if "&" in part:
                resolved.append(part.replace("&", parent))
            else:
                resolved.append(f"{parent} {part}")
    return resolved


def _split_compounds(selector: str) -> Tuple[List[str], bool]:
    """Split a complex selector into compounds; report explicit combinators."""
    compounds: List[str] = []
    current: List[str] = []
    depth = 0
    has_combinator = False

    for char in selector:
        if char in "([":
            depth += 1
        elif char in ")]":
            depth = max(0, depth - 1)

        if depth == 0 and (char.isspace() or char in _COMBINATORS):
            if current:
                compounds.append("".join(current))
                current = []
            if char in _COMBINATORS:
                has_combinator = True
            continue
        current.append(char)

    if current:
        compounds.append("".join(current))
    return compounds, has_combinator


def _parse_compound(text: str) -> _Compound:
    compound = _Compound(text=text)
    index = 0
    length = len(text)

    while index < length:
        char = text[index]

        if char == "&":
            compound.parent = True
            match = _NAME.match(text, index + 1)
            index = match.end() if match else index + 1
        elif char in ".#%":
            match = _NAME.match(text, index + 1)
            if not match:
                index += 1
                continue
            if char == ".":
                compound.classes.append(match.group())
            elif char == "#":
                compound.ids.append(match.group())
            else:
                compound.placeholder = True
            index = match.end()
        elif char == "*":
            compound.universal = True
            index += 1
        elif char == "[":
            compound.attributes += 1
            index = _closing(text, index, "[", "]") + 1
        elif char == ":":
            double = text.startswith("::", index)
            start = index + 2 if double else index + 1
            match = _NAME.match(text, start)
            name = match.group().lower() if match else ""
            index = match.end() if match else start
            argument = None
            if index < length and text[index] == "(":
                end = _closing(text, index, "(", ")")
                argument = text[index + 1 : end]
                index = end + 1
            if double or name in LEGACY_PSEUDO_ELEMENTS:
                compound.pseudo_elements.append(name)
            else:
                compound.pseudo_classes.append((name, argument))
                if argument and name in _ARGUMENT_PSEUDOS | _ZERO_PSEUDOS:
                    for part in split_selector_list(argument):
                        compounds, _ = _split_compounds(part)
                        compound.inner.extend(_parse_compound(c) for c in compounds)
        elif index == 0:
            match = _NAME.match(text, index)
            if (
                match
                and not match.group()[0].isdigit()
                and match.group().lower() not in _KEYFRAME_STOPS
            ):
                compound.types.append(match.group())
                index = match.end()
            else:
                index += 1
        else:
            index += 1

    return compound


def _compound_specificity(compound: _Compound) -> Specificity:
    ids = len(compound.ids)
    classes = len(compound.classes) + compound.attributes
    types = len(compound.types) + len(compound.pseudo_elements)

    for name, argument in compound.pseudo_classes:
        if name in _ZERO_PSEUDOS:
            continue
        if name in _ARGUMENT_PSEUDOS and argument:
            a, b, c = max(
                (calculate_specificity(part) for part in split_selector_list(argument)),
                default=(0, 0, 0),
            )
            ids, classes, types = ids + a, classes + b, types + c
        else:
            classes += 1

    return (ids, classes, types)


def calculate_specificity(selector: str) -> Specificity:
    """
    Calculate CSS selector specificity.

    Returns tuple of (id_count, class_count, type_count). For a selector list
    the most specific member wins.
    """
    best: Specificity = (0, 0, 0)
    for part in split_selector_list(_mask(selector)):
        compounds, _ = _split_compounds(part)
        total = (0, 0, 0)
        for text in compounds:
            a, b, c = _compound_specificity(_parse_compound(text))
            total = (total[0] + a, total[1] + b, total[2] + c)
        best = max(best, total)
    return best


def _walk(compounds: Sequence[_Compound]) -> List[_Compound]:
    """Flatten compounds together with those nested in :not() and friends."""
    flat: List[_Compound] = []
    for compound in compounds:
        flat.append(compound)
        flat.extend(_walk(compound.inner))
    return flat


def _determine_selector_type(selector: str) -> str:
    """Determine the type of a selector from its first complex member."""
    parts = split_selector_list(_mask(selector))
    if not parts:
        return "unknown"

    first = parts[0]
    compounds, has_combinator = _split_compounds(first)

    # Check for combinators first (they can contain other selectors)
    if has_combinator:
        return "combinator"
    elif len(compounds) > 1:
        return "descendant"

    compound = _parse_compound(compounds[0]) if compounds else _Compound(text="")
    if compound.pseudo_elements:
        return "pseudo-element"
    elif compound.pseudo_classes:
        return "pseudo-class"
    elif first.startswith("&"):
        return "parent"
    elif first.startswith("%"):
        return "placeholder"
    elif first.startswith("#"):
        return "id"
    elif first.startswith("."):
        return "class"
    elif first.startswith("["):
        return "attribute"
    elif first.startswith("*"):
        return "universal"
    else:
        return "type"


class SelectorAnalyzer(LoggerMixin):
    """Checks selectors against the naming and specificity conventions."""

    def __init__(self, rules: Optional[RulesConfig] = None, strict_mode: bool = False):
        self.rules = rules or RulesConfig()
        self.strict_mode = strict_mode
        # Longest prefix first so overlapping prefixes resolve to the most specific
        self._prefixes = sorted(self.rules.namespaces, key=len, reverse=True)

    def parse_class_name(self, class_name: str) -> BemName:
        """
        Split a class name into namespace, block, element and modifier.

        Args:
            class_name: Class name with or without its leading dot

        Returns:
            BemName; ``valid`` is False with an ``error`` when the name is not BEM
        """
        name = class_name.lstrip(".")
        namespace = next((p for p in self._prefixes if name.startswith(p)), None)
        remainder = name[len(namespace) :] if namespace else name

        result = BemName(
            raw=name,
            namespace=namespace,
            role=self.rules.namespaces.get(namespace) if namespace else None,
        )

        match = _BEM_PATTERN.match(remainder)
        if match:
            result.block = match.group("block")
            result.element = match.group("element")
            result.modifier = match.group("modifier")
        else:
            result.valid = False
            result.error = self._explain_bem_error(name, remainder)
        return result

    def _explain_bem_error(self, name: str, remainder: str) -> str:
        if not remainder:
            return f"Class '{name}' has nothing after its namespace prefix"
        if any(char.isupper() for char in remainder):
            return f"Class '{name}' must be lowercase"
        if remainder.count("__") > 1:
            return f"Class '{name}' is an element of an element; flatten it to block__element"
        if remainder.count("--") > 1:
            return f"Class '{name}' combines several modifiers; use one modifier per class"
        if "--" in remainder and "__" in remainder and remainder.index("--") < remainder.index("__"):
            return f"Class '{name}' has an element after its modifier"
        return f"Class '{name}' does not follow block__element--modifier naming"

    def analyze_selector(
        self,
        selector: str,
        depth: int = 1,
        parents: Optional[Sequence[str]] = None,
    ) -> SelectorAnalysis:
        """
        Analyse a selector and collect style violations.

        Args:
            selector: Selector or selector list as written in the source
            depth: Nesting depth of the rule (top-level rules are depth 1)
            parents: Resolved selectors of the enclosing rule, if nested

        Returns:
            SelectorAnalysis with BEM parts, specificity and violations
        """
        violations: List[StyleViolation] = []
        masked = _mask(selector)

        raw_compounds: List[_Compound] = []
        for part in split_selector_list(masked):
            compounds, _ = _split_compounds(part)
            raw_compounds.extend(_parse_compound(text) for text in compounds)

        # Class names come from the resolved selector so "&__title" is
        # checked as the full "c-card__title"
        inherited: set = set()
        if parents:
            for parent in parents:
                for text in _split_compounds(_mask(parent))[0]:
                    for compound in _walk([_parse_compound(text)]):
                        inherited.update(compound.classes)

        resolved = resolve_selector(selector, parents)
        class_names: List[str] = []
        for part in resolved:
            for text in _split_compounds(_mask(part))[0]:
                for compound in _walk([_parse_compound(text)]):
                    for name in compound.classes:
                        if name not in inherited and name not in class_names:
                            class_names.append(name)

        analysis = SelectorAnalysis(
            selector=selector,
            selector_type=_determine_selector_type(selector),
            specificity=max(
                (calculate_specificity(part) for part in resolved), default=(0, 0, 0)
            ),
            depth=depth,
        )

        for compound in _walk(raw_compounds):
            for id_name in compound.ids:
                analysis.ids.append(id_name)
                self._add(
                    violations,
                    "selector-no-id",
                    f"ID selector '#{id_name}' is not allowed; use a class instead",
                    selector,
                )
            self._check_types(compound, selector, analysis, violations)

        for name in class_names:
            bem = self.parse_class_name(name)
            analysis.classes.append(bem)
            self._check_class(bem, selector, violations)

        if depth > self.rules.max_nesting_depth:
            self._add(
                violations,
                "selector-max-nesting-depth",
                f"Selector is nested {depth} levels deep "
                f"(maximum {self.rules.max_nesting_depth})",
                selector,
            )

        analysis.violations = violations
        return analysis

    def analyze_selectors(self, selectors: List[str]) -> List[SelectorAnalysis]:
        """Analyse multiple top-level selectors."""
        return [self.analyze_selector(selector) for selector in selectors]

    def _check_types(
        self,
        compound: _Compound,
        selector: str,
        analysis: SelectorAnalysis,
        violations: List[StyleViolation],
    ) -> None:
        for type_name in compound.types:
            analysis.type_selectors.append(type_name)
            if type_name.lower() in self.rules.allowed_type_selectors:
                continue
            if compound.classes or compound.ids:
                self._add(
                    violations,
                    "selector-qualified-type",
                    f"Tag '{type_name}' qualifies '{compound.text}'; drop the tag",
                    selector,
                )
            else:
                self._add(
                    violations,
                    "selector-no-type",
                    f"Bare tag selector '{compound.text}'; target a class instead",
                    selector,
                )

    def _check_class(
        self, bem: BemName, selector: str, violations: List[StyleViolation]
    ) -> None:
        if bem.raw.startswith(self.rules.js_hook_prefix):
            self._add(
                violations,
                "selector-no-js-hooks",
                f"Class '{bem.raw}' is a JavaScript hook and must not be styled",
                selector,
            )
            return

        if not bem.valid:
            self._add(violations, "selector-class-pattern", bem.error or "", selector)

        if bem.namespace is None:
            prefixes = ", ".join(self._prefixes)
            self._add(
                violations,
                "selector-namespace",
                f"Class '{bem.raw}' has no namespace prefix (expected one of: {prefixes})",
                selector,
            )

    def _add(
        self,
        violations: List[StyleViolation],
        rule_id: str,
        message: str,
        selector: str,
    ) -> None:
        severity = resolve_severity(rule_id, self.rules, self.strict_mode)
        if severity is None:
            return
        violations.append(
            StyleViolation(message, rule=rule_id, severity=severity, selector=selector)
        )
