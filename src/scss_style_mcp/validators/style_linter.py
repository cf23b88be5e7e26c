"""Stylesheet linter running every style-guide check over SCSS source."""

import re
import time
from typing import Dict, List, Optional, Tuple, Iterator
from dataclasses import dataclass

from ..config import ValidatorConfig, RulesConfig, PerformanceConfig
from ..utils.cache import LRUCache, cache_key
from ..utils.errors import ValidationError, ParsingError, StyleViolation
from ..utils.logging_config import LoggerMixin, log_lint_result
from .declaration_order import DeclarationOrderChecker, OrderItem
from .formatting_checker import FormattingChecker
from .rules import resolve_severity
from .scss_parser import RuleItem, Stylesheet, StyleRule, parse_scss
from .selector_analyzer import SelectorAnalyzer


# At-rule blocks whose inner "selectors" are not class selectors
_SELECTORLESS_CONTEXTS = {
    "keyframes",
    "-webkit-keyframes",
    "-moz-keyframes",
    "font-face",
    "page",
    "mixin",
    "function",
}


@dataclass
class LintResult:
    """Result of linting a stylesheet."""

    valid: bool
    errors: List[ValidationError]
    warnings: List[ValidationError]
    suggestions: List[str]
    summary: str
    parse_time_ms: float
    rule_count: int
    selector_count: int


class StyleLinter(LoggerMixin):
    """Main SCSS linter checking selectors, ordering and formatting."""

    def __init__(
        self,
        config: ValidatorConfig,
        rules: Optional[RulesConfig] = None,
        performance: Optional[PerformanceConfig] = None,
    ):
        self.config = config
        self.rules = rules or RulesConfig()
        self.strict_mode = config.strict_mode
        performance = performance or PerformanceConfig()
        self._cache: LRUCache[str, LintResult] = LRUCache(
            max_size=performance.cache_size, ttl=performance.cache_ttl
        )

    def lint(self, css_content: str, filename: Optional[str] = None) -> LintResult:
        """
        Lint SCSS content against the style guide.

        Args:
            css_content: The SCSS content to lint
            filename: Optional filename for logging

        Returns:
            LintResult with errors, warnings, and suggestions
        """
        start_time = time.time()
        errors: List[ValidationError] = []
        warnings: List[ValidationError] = []
        suggestions: List[str] = []
        rule_count = 0
        selector_count = 0

        key = None
        if self.config.cache_enabled:
            key = cache_key(
                css_content,
                strict=self.strict_mode,
                rules=self.rules.model_dump_json(),
            )
            cached = self._cache.get(key)
            if cached is not None:
                log_lint_result(
                    filename,
                    len(css_content),
                    len(cached.errors),
                    len(cached.warnings),
                    time.time() - start_time,
                    cached=True,
                )
                return cached

        try:
            # Check file size limit
            if len(css_content.encode("utf-8")) > self.config.max_file_size:
                errors.append(
                    ValidationError(
                        f"Stylesheet exceeds maximum size limit of {self.config.max_file_size} bytes"
                    )
                )
                return self._create_result(False, errors, warnings, suggestions, 0, 0, 0)

            try:
                stylesheet = parse_scss(css_content)
            except ParsingError as e:
                errors.append(e)
            else:
                rule_count = len(stylesheet.rules)
                selector_count = stylesheet.selector_count

                for violation in self._check_stylesheet(stylesheet, css_content, suggestions):
                    if violation.severity == "error":
                        errors.append(violation)
                    else:
                        warnings.append(violation)

        except Exception as e:
            self.logger.error(f"Lint failed: {e}")
            errors.append(ValidationError(f"Lint failed: {str(e)}"))

        errors.sort(key=_position_key)
        warnings.sort(key=_position_key)

        parse_time = time.time() - start_time
        log_lint_result(filename, len(css_content), len(errors), len(warnings), parse_time)

        result = self._create_result(
            len(errors) == 0,
            errors,
            warnings,
            suggestions,
            parse_time * 1000,
            rule_count,
            selector_count,
        )
        if key is not None:
            self._cache.put(key, result)
        return result

    def lint_file(self, file_path: str) -> LintResult:
        """Lint an SCSS file."""
        try:
            with open(file_path, "r", encoding="utf-8") as f:
                content = f.read()
            return self.lint(content, filename=file_path)
        except FileNotFoundError:
            error = ValidationError(f"File not found: {file_path}")
            return LintResult(
                valid=False,
                errors=[error],
                warnings=[],
                suggestions=[],
                summary="File not found",
                parse_time_ms=0,
                rule_count=0,
                selector_count=0,
            )
        except (OSError, UnicodeDecodeError) as e:
            error = ValidationError(f"Failed to read file {file_path}: {str(e)}")
            return LintResult(
                valid=False,
                errors=[error],
                warnings=[],
                suggestions=[],
                summary="File read error",
                parse_time_ms=0,
                rule_count=0,
                selector_count=0,
            )

    def clear_cache(self) -> None:
        self.logger.debug(f"Clearing lint cache: {self._cache.stats()}")
        self._cache.clear()

    def _check_stylesheet(
        self, stylesheet: Stylesheet, css_content: str, suggestions: List[str]
    ) -> List[StyleViolation]:
        """Run selector, ordering and formatting checks over a parsed stylesheet."""
        violations: List[StyleViolation] = []
        selector_analyzer = SelectorAnalyzer(self.rules, self.strict_mode)
        order_checker = DeclarationOrderChecker(self.rules, self.strict_mode)
        formatting_checker = FormattingChecker(self.rules, self.strict_mode)

        seen_selectors: Dict[Tuple[Tuple[str, ...], str], int] = {}

        for rule in stylesheet.rules:
            if not any(context in _SELECTORLESS_CONTEXTS for context in rule.contexts):
                violations.extend(
                    self._check_selectors(rule, selector_analyzer, seen_selectors, suggestions)
                )

            order_items = [
                item for item in (self._order_item(entry) for entry in rule.items) if item
            ]
            violations.extend(order_checker.check_order(order_items))
            violations.extend(order_checker.check_duplicates(order_items))
            violations.extend(self._check_important(rule))

            if not rule.items:
                self._add(
                    violations,
                    "block-no-empty",
                    f"Empty rule for selector: {rule.selector}",
                    rule.line,
                    rule.column,
                    selector=rule.selector,
                )

        for declaration in _walk_declarations(stylesheet.items):
            for violation in formatting_checker.check_declaration(
                declaration.raw, declaration.line, declaration.column
            ):
                # Trailing whitespace is checked once per line below
                if violation.rule != "whitespace-trailing":
                    violations.append(violation)

        violations.extend(self._check_trailing_whitespace(css_content))
        return violations

    def _check_selectors(
        self,
        rule: StyleRule,
        analyzer: SelectorAnalyzer,
        seen_selectors: Dict[Tuple[Tuple[str, ...], str], int],
        suggestions: List[str],
    ) -> List[StyleViolation]:
        violations: List[StyleViolation] = []
        parent = rule.parent_rule
        analysis = analyzer.analyze_selector(
            rule.selector,
            depth=rule.depth,
            parents=parent.resolved_selectors if parent else None,
        )

        for violation in analysis.violations:
            violation.line = rule.line
            violation.column = rule.column
            violations.append(violation)

        if analysis.specificity_score > self.rules.max_specificity_score:
            suggestions.append(
                f"Line {rule.line}: Consider simplifying selector '{rule.selector}' "
                f"(specificity {analysis.specificity})"
            )

        for resolved in rule.resolved_selectors:
            normalized = " ".join(resolved.split())
            key = (tuple(rule.contexts), normalized)
            if key in seen_selectors:
                self._add(
                    violations,
                    "selector-no-duplicate",
                    f"Duplicate selector: {normalized} (first declared on line {seen_selectors[key]})",
                    rule.line,
                    rule.column,
                    selector=rule.selector,
                )
            else:
                seen_selectors[key] = rule.line

        return violations

    def _check_important(self, rule: StyleRule) -> List[StyleViolation]:
        violations: List[StyleViolation] = []
        utility = re.compile(rf"\.{re.escape(self.rules.utility_prefix)}")
        if any(utility.search(selector) for selector in rule.resolved_selectors):
            return violations

        for declaration in rule.declarations:
            if declaration.important:
                self._add(
                    violations,
                    "declaration-no-important",
                    f"!important on '{declaration.name}' outside a utility class",
                    declaration.line,
                    declaration.column,
                    selector=rule.selector,
                    property_name=declaration.name,
                )
        return violations

    def _check_trailing_whitespace(self, css_content: str) -> List[StyleViolation]:
        violations: List[StyleViolation] = []
        for i, line in enumerate(css_content.split("\n"), 1):
            content = line.rstrip("\r")
            stripped = content.rstrip(" \t")
            if stripped != content:
                self._add(
                    violations,
                    "whitespace-trailing",
                    "Trailing whitespace",
                    i,
                    len(stripped) + 1,
                )
        return violations

    @staticmethod
    def _order_item(entry: RuleItem) -> Optional[OrderItem]:
        if entry.kind == "declaration" and entry.name:
            return OrderItem("property", entry.name, entry.line, entry.column)
        if entry.kind == "at-rule":
            return OrderItem("at-rule", entry.text, entry.line, entry.column)
        if entry.kind == "rule":
            return OrderItem("selector", entry.text, entry.line, entry.column)
        # Variables and at-rule blocks (@media, @include mq() { }) are not ordered
        return None

    def _add(
        self,
        violations: List[StyleViolation],
        rule_id: str,
        message: str,
        line: Optional[int],
        column: Optional[int],
        selector: Optional[str] = None,
        property_name: Optional[str] = None,
    ) -> None:
        severity = resolve_severity(rule_id, self.rules, self.strict_mode)
        if severity is None:
            return
        violations.append(
            StyleViolation(
                message,
                rule=rule_id,
                severity=severity,
                line=line,
                column=column,
                selector=selector,
                property_name=property_name,
            )
        )

    def _create_result(
        self,
        valid: bool,
        errors: List[ValidationError],
        warnings: List[ValidationError],
        suggestions: List[str],
        parse_time_ms: float,
        rule_count: int,
        selector_count: int,
    ) -> LintResult:
        """Create a LintResult with summary."""
        if valid:
            if warnings:
                summary = f"Valid with {len(warnings)} warnings"
            else:
                summary = "Valid SCSS"
        else:
            summary = f"Invalid SCSS: {len(errors)} errors"

        if suggestions:
            summary += f", {len(suggestions)} suggestions"

        return LintResult(
            valid=valid,
            errors=errors,
            warnings=warnings,
            suggestions=suggestions,
            summary=summary,
            parse_time_ms=parse_time_ms,
            rule_count=rule_count,
            selector_count=selector_count,
        )


def _walk_declarations(items: List[RuleItem]) -> Iterator[RuleItem]:
    for item in items:
        if item.kind == "declaration":
            yield item
        elif item.block is not None:
            yield from _walk_declarations(item.block.items)


def _position_key(error: ValidationError) -> Tuple[int, int]:
    return (error.line or 0, error.column or 0)
