"""Formatting checks on the raw text of a single declaration."""

import re
from typing import List, Optional, Tuple

from ..config import RulesConfig
from ..utils.errors import StyleViolation
from ..utils.logging_config import LoggerMixin
from .rules import resolve_severity


_LENGTH_UNITS = "px|em|rem|ex|ch|vw|vh|vmin|vmax|vi|vb|cm|mm|in|pt|pc|q"
_ZERO_WITH_UNIT = re.compile(
    rf"(?<![\w.#$])[-+]?(?:0+(?:\.0+)?|\.0+)({_LENGTH_UNITS})\b", re.IGNORECASE
)
_HEX_COLOR = re.compile(r"#([0-9a-fA-F]+)\b")
_MATH_FUNCTIONS = ("calc", "clamp", "min", "max")


def _mask_value(text: str) -> str:
    """Blank out quoted strings, url() arguments and interpolation, keeping offsets."""
    chars = list(text)
    length = len(text)

    def blank(start: int, end: int, fill: str = " ") -> None:
        for k in range(start, min(end, length)):
            if chars[k] != "\n":
                chars[k] = fill

    index = 0
    while index < length:
        char = text[index]
        if char in "\"'":
            end = index + 1
            while end < length and text[end] != char:
                end += 2 if text[end] == "\\" else 1
            blank(index + 1, end)
            index = end + 1
        elif text[index : index + 4].lower() == "url(":
            end = text.find(")", index + 4)
            end = length if end == -1 else end
            blank(index + 4, end)
            index = end + 1
        elif text.startswith("#{", index):
            end = text.find("}", index)
            end = length if end == -1 else end + 1
            blank(index, end, "x")
            index = end
        else:
            index += 1

    return "".join(chars)


def _inside_math_function(text: str, index: int) -> bool:
    """True when ``index`` sits inside calc() or a sibling math function."""
    depth = 0
    for position in range(index - 1, -1, -1):
        char = text[position]
        if char == ")":
            depth += 1
        elif char == "(":
            if depth == 0:
                name = re.search(r"([\w-]+)$", text[:position])
                if name and name.group(1).lower() in _MATH_FUNCTIONS:
                    return True
            else:
                depth -= 1
    return False


def _find_colon(text: str) -> int:
    depth = 0
    for index, char in enumerate(text):
        if char == "(":
            depth += 1
        elif char == ")":
            depth = max(0, depth - 1)
        elif char == ":" and depth == 0:
            return index
    return -1


class FormattingChecker(LoggerMixin):
    """Checks whitespace, semicolon, zero-unit and colour conventions."""

    def __init__(self, rules: Optional[RulesConfig] = None, strict_mode: bool = False):
        self.rules = rules or RulesConfig()
        self.strict_mode = strict_mode

    def check_declaration(
        self, raw: str, line: Optional[int] = None, column: Optional[int] = None
    ) -> List[StyleViolation]:
        """
        Check one declaration as written in the source.

        Args:
            raw: Declaration text, e.g. "color: #fff;"
            line: Line of the first character of ``raw`` (default 1)
            column: Column of the first character of ``raw`` (default 1)

        Returns:
            List of formatting violations with absolute positions
        """
        violations: List[StyleViolation] = []
        base_line = line or 1
        base_column = column or 1
        masked = _mask_value(raw)

        def position(index: int) -> Tuple[int, int]:
            line_offset = masked.count("\n", 0, index)
            if line_offset == 0:
                return base_line, base_column + index
            return base_line + line_offset, index - masked.rfind("\n", 0, index)

        def add(rule_id: str, message: str, index: int, prop: Optional[str]) -> None:
            severity = resolve_severity(rule_id, self.rules, self.strict_mode)
            if severity is None:
                return
            at_line, at_column = position(index)
            violations.append(
                StyleViolation(
                    message,
                    rule=rule_id,
                    severity=severity,
                    line=at_line,
                    column=at_column,
                    property_name=prop,
                )
            )

        colon = _find_colon(masked)
        if colon == -1:
            return violations

        name_part = masked[:colon]
        prop = raw[:colon].strip() or None
        value_start = colon + 1
        value_part = masked[value_start:]

        # Whitespace around the colon
        if name_part != name_part.rstrip():
            add(
                "declaration-colon-space-before",
                f"Unexpected whitespace before ':' in '{prop}'",
                len(name_part.rstrip()),
                prop,
            )

        if value_part.strip(" \t;"):
            gap = len(value_part) - len(value_part.lstrip(" \t"))
            continues_on_next_line = value_part[gap:].startswith(("\n", "\r"))
            if not continues_on_next_line and value_part[:gap] != " ":
                add(
                    "declaration-colon-space-after",
                    f"Expected exactly one space after ':' in '{prop}'",
                    value_start,
                    prop,
                )

        # Semicolon
        stripped = masked.rstrip()
        if not stripped.endswith(";"):
            add(
                "declaration-semicolon",
                f"Missing semicolon at end of declaration '{prop}'",
                len(stripped),
                prop,
            )
        else:
            before = stripped[:-1]
            if before != before.rstrip():
                add(
                    "declaration-semicolon-space-before",
                    f"Unexpected whitespace before ';' in '{prop}'",
                    len(before.rstrip()),
                    prop,
                )

        # Trailing whitespace inside multi-line declarations
        offset = 0
        for text_line in raw.split("\n"):
            content = text_line.rstrip("\r")
            if content != content.rstrip(" \t"):
                add(
                    "whitespace-trailing",
                    "Trailing whitespace",
                    offset + len(content.rstrip(" \t")),
                    prop,
                )
            offset += len(text_line) + 1

        # Zero lengths
        for match in _ZERO_WITH_UNIT.finditer(value_part):
            index = value_start + match.start()
            if _inside_math_function(masked, index):
                continue
            add(
                "number-zero-unit",
                f"Unit on zero value '{match.group(0)}'; write 0",
                index,
                prop,
            )

        # Hex colours
        for match in _HEX_COLOR.finditer(value_part):
            self._check_hex(match.group(1), value_start + match.start(), prop, add)

        return violations

    def _check_hex(self, digits: str, index: int, prop: Optional[str], add) -> None:
        if len(digits) not in (3, 4, 6, 8):
            return

        if self.rules.hex_case == "lower" and digits != digits.lower():
            add(
                "color-hex-case",
                f"Expected '#{digits}' to be '#{digits.lower()}'",
                index,
                prop,
            )
        elif self.rules.hex_case == "upper" and digits != digits.upper():
            add(
                "color-hex-case",
                f"Expected '#{digits}' to be '#{digits.upper()}'",
                index,
                prop,
            )

        if self.rules.hex_length == "short" and len(digits) in (6, 8):
            pairs = [digits[i : i + 2] for i in range(0, len(digits), 2)]
            if all(pair[0].lower() == pair[1].lower() for pair in pairs):
                short = "".join(pair[0] for pair in pairs)
                add("color-hex-length", f"Expected '#{digits}' to be '#{short}'", index, prop)
        elif self.rules.hex_length == "long" and len(digits) in (3, 4):
            long_form = "".join(char * 2 for char in digits)
            add("color-hex-length", f"Expected '#{digits}' to be '#{long_form}'", index, prop)
