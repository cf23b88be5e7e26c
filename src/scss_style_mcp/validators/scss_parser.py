"""Light SCSS block parser: splits source into nested rules and statements.

This is not a Sass compiler. It only recognises enough structure (comments,
strings, interpolation, blocks and statements) for the style checkers to run
on real files with accurate positions.
"""

import re
from bisect import bisect_right
from typing import List, Optional, Tuple, Union
from dataclasses import dataclass, field

from ..utils.errors import ParsingError
from .selector_analyzer import split_selector_list, resolve_selector


_AT_NAME = re.compile(r"@([\w-]+)")
_IMPORTANT = re.compile(r"!\s*important\b", re.IGNORECASE)


@dataclass
class RuleItem:
    """A statement or nested block inside a rule (or at the top level)."""

    kind: str  # 'declaration', 'at-rule', 'variable', 'rule' or 'at-block'
    text: str
    line: int
    column: int
    raw: str = ""
    name: Optional[str] = None
    value: Optional[str] = None
    important: bool = False
    block: Optional[Union["StyleRule", "AtBlock"]] = None


@dataclass
class AtBlock:
    """A block opened by an at-rule (@media, @include ... { }, @keyframes, ...)."""

    name: str
    prelude: str
    line: int
    column: int
    items: List[RuleItem] = field(default_factory=list)
    parent: Optional[Union["StyleRule", "AtBlock"]] = None


@dataclass
class StyleRule:
    """A selector with its block."""

    selector: str
    selectors: List[str]
    resolved_selectors: List[str]
    line: int
    column: int
    depth: int
    items: List[RuleItem] = field(default_factory=list)
    parent: Optional[Union["StyleRule", "AtBlock"]] = None
    contexts: List[str] = field(default_factory=list)

    @property
    def declarations(self) -> List[RuleItem]:
        return [item for item in self.items if item.kind == "declaration"]

    @property
    def parent_rule(self) -> Optional["StyleRule"]:
        node = self.parent
        while node is not None and not isinstance(node, StyleRule):
            node = node.parent
        return node


@dataclass
class Stylesheet:
    """Parsed stylesheet: top-level items plus every rule in document order."""

    items: List[RuleItem] = field(default_factory=list)
    rules: List[StyleRule] = field(default_factory=list)

    @property
    def selector_count(self) -> int:
        return sum(len(rule.selectors) for rule in self.rules)


class SCSSParser:
    """Single-pass scanner producing a Stylesheet."""

    def __init__(self, source: str):
        self.source = source
        self._line_starts = [0] + [m.end() for m in re.finditer(r"\n", source)]

    def position(self, index: int) -> Tuple[int, int]:
        """1-based (line, column) of a source offset."""
        line = bisect_right(self._line_starts, index)
        return line, index - self._line_starts[line - 1] + 1

    def parse(self) -> Stylesheet:
        source = self.source
        length = len(source)
        stylesheet = Stylesheet()
        stack: List[Union[StyleRule, AtBlock, None]] = [None]
        containers: List[List[RuleItem]] = [stylesheet.items]

        buffer: List[str] = []
        start: Optional[int] = None
        paren = 0
        index = 0

        def begin(at: int) -> None:
            nonlocal start
            if start is None:
                start = at

        def reset() -> None:
            nonlocal start, paren
            buffer.clear()
            start = None
            paren = 0

        while index < length:
            char = source[index]
            following = source[index + 1] if index + 1 < length else ""

            if char == "/" and following == "*":
                end = source.find("*/", index + 2)
                if end == -1:
                    line, column = self.position(index)
                    raise ParsingError("Unterminated comment", line=line, column=column)
                index = end + 2
                continue

            if char == "/" and following == "/" and paren == 0:
                end = source.find("\n", index)
                index = length if end == -1 else end
                continue

            if char in "\"'":
                end = index + 1
                while end < length and source[end] != char:
                    if source[end] == "\n":
                        break
                    end += 2 if source[end] == "\\" else 1
                if end >= length or source[end] != char:
                    line, column = self.position(index)
                    raise ParsingError("Unterminated string", line=line, column=column)
                begin(index)
                buffer.append(source[index : end + 1])
                index = end + 1
                continue

            if char == "#" and following == "{":
                end = self._interpolation_end(index)
                begin(index)
                buffer.append(source[index : end + 1])
                index = end + 1
                continue

            if char == "(":
                paren += 1
            elif char == ")":
                paren = max(0, paren - 1)

            if char == "{":
                header = "".join(buffer).strip()
                block_start = start if start is not None else index
                block = self._open_block(header, block_start, stack[-1], stylesheet)
                containers[-1].append(
                    RuleItem(
                        kind="rule" if isinstance(block, StyleRule) else "at-block",
                        text=header,
                        line=block.line,
                        column=block.column,
                        block=block,
                    )
                )
                stack.append(block)
                containers.append(block.items)
                reset()
                index += 1
                continue

            if char == ";" and paren == 0:
                if start is not None:
                    containers[-1].append(self._statement(buffer, start, index + 1))
                reset()
                index += 1
                continue

            if char == "}":
                if len(stack) == 1:
                    line, column = self.position(index)
                    raise ParsingError("Unexpected '}'", line=line, column=column)
                if start is not None and "".join(buffer).strip():
                    end = start + len(source[start:index].rstrip())
                    containers[-1].append(self._statement(buffer, start, end))
                stack.pop()
                containers.pop()
                reset()
                index += 1
                continue

            if not char.isspace():
                begin(index)
            if start is not None:
                buffer.append(char)
            index += 1

        if len(stack) > 1:
            open_block = stack[-1]
            if isinstance(open_block, StyleRule):
                header = open_block.selector
            elif isinstance(open_block, AtBlock):
                header = f"@{open_block.name} {open_block.prelude}".strip()
            raise ParsingError(
                f"Unclosed block '{header}'",
                line=getattr(open_block, "line", None),
                column=getattr(open_block, "column", None),
            )

        if start is not None and "".join(buffer).strip():
            end = start + len(source[start:].rstrip())
            containers[-1].append(self._statement(buffer, start, end))

        return stylesheet

    def _interpolation_end(self, index: int) -> int:
        depth = 0
        for position in range(index + 1, len(self.source)):
            if self.source[position] == "{":
                depth += 1
            elif self.source[position] == "}":
                depth -= 1
                if depth == 0:
                    return position
        line, column = self.position(index)
        raise ParsingError("Unterminated interpolation", line=line, column=column)

    def _open_block(
        self,
        header: str,
        start: int,
        parent: Optional[Union[StyleRule, AtBlock]],
        stylesheet: Stylesheet,
    ) -> Union[StyleRule, AtBlock]:
        line, column = self.position(start)

        if not header:
            raise ParsingError("Missing selector before '{'", line=line, column=column)

        if header.startswith("@"):
            match = _AT_NAME.match(header)
            name = match.group(1).lower() if match else ""
            prelude = header[match.end() :].strip() if match else header[1:]
            return AtBlock(name=name, prelude=prelude, line=line, column=column, parent=parent)

        if header.endswith(":"):
            # Nested properties: font: { family: ...; }
            return AtBlock(
                name="nested-properties",
                prelude=header[:-1].strip(),
                line=line,
                column=column,
                parent=parent,
            )

        contexts: List[str] = []
        parent_rule: Optional[StyleRule] = None
        node = parent
        while node is not None:
            if isinstance(node, AtBlock):
                contexts.append(node.name)
            elif parent_rule is None:
                parent_rule = node
            node = node.parent

        rule = StyleRule(
            selector=header,
            selectors=split_selector_list(header),
            resolved_selectors=resolve_selector(
                header, parent_rule.resolved_selectors if parent_rule else None
            ),
            line=line,
            column=column,
            depth=parent_rule.depth + 1 if parent_rule else 1,
            parent=parent,
            contexts=contexts,
        )
        stylesheet.rules.append(rule)
        return rule

    def _statement(self, buffer: List[str], start: int, end: int) -> RuleItem:
        text = "".join(buffer).strip().rstrip(";").strip()
        raw = self.source[start:end]
        line, column = self.position(start)

        if text.startswith("@"):
            match = _AT_NAME.match(text)
            return RuleItem(
                kind="at-rule",
                text=text,
                line=line,
                column=column,
                raw=raw,
                name=match.group(1).lower() if match else text,
            )

        colon = self._top_level_colon(text)
        if text.startswith("$"):
            return RuleItem(
                kind="variable",
                text=text,
                line=line,
                column=column,
                raw=raw,
                name=text[:colon].strip() if colon != -1 else text,
                value=text[colon + 1 :].strip() if colon != -1 else None,
            )

        if colon == -1:
            raise ParsingError(
                f"Expected a declaration, found '{text}'", line=line, column=column
            )

        value = text[colon + 1 :].strip()
        return RuleItem(
            kind="declaration",
            text=text,
            line=line,
            column=column,
            raw=raw,
            name=text[:colon].strip(),
            value=value,
            important=bool(_IMPORTANT.search(value)),
        )

    @staticmethod
    def _top_level_colon(text: str) -> int:
        depth = 0
        for index, char in enumerate(text):
            if char == "(":
                depth += 1
            elif char == ")":
                depth = max(0, depth - 1)
            elif char == ":" and depth == 0:
                return index
        return -1


def parse_scss(source: str) -> Stylesheet:
    """Parse SCSS source into a Stylesheet."""
    return SCSSParser(source).parse()
