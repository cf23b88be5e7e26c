"""MCP tools for selector, class-name and declaration-order analysis."""

import time
from typing import Dict, Any, List, Annotated
from pydantic import Field

from ..config import StyleMCPConfig
from ..utils.logging_config import log_tool_execution, log_tool_completion, get_logger
from ..utils.errors import ToolExecutionError
from ..validators.selector_analyzer import SelectorAnalyzer
from ..validators.declaration_order import DeclarationOrderChecker
from ..validators.rules import describe_rules


def register_analysis_tools(mcp: Any, config: StyleMCPConfig) -> None:
    """Register all analysis tools with the MCP server."""

    logger = get_logger("analysis_tools")

    @mcp.tool()
    async def analyze_selector(
        selector: Annotated[
            str,
            Field(
                description="Selector or selector list to classify into BEM parts and namespaces, "
                "e.g. '.c-card__title--large' or '#main ul li'.",
                min_length=1,
            ),
        ],
        depth: Annotated[
            int,
            Field(description="Nesting depth of the rule; top-level rules are depth 1.", ge=1),
        ] = 1,
    ) -> Dict[str, Any]:
        """
        Analyse a selector against the naming conventions.

        Args:
            selector: Selector string
            depth: Nesting depth of the rule

        Returns:
            Dictionary with BEM parts, specificity and violations
        """
        start_time = time.time()
        tool_name = "analyze_selector"

        try:
            log_tool_execution(tool_name, {"selector": selector, "depth": depth})

            analyzer = SelectorAnalyzer(config.rules, config.validators.strict_mode)
            analysis = analyzer.analyze_selector(selector, depth=depth)

            response = {
                "selector": selector,
                "valid": not any(v.severity == "error" for v in analysis.violations),
                "type": analysis.selector_type,
                "specificity": list(analysis.specificity),  # Convert tuple to list for JSON
                "specificity_score": analysis.specificity_score,
                "classes": [bem.to_dict() for bem in analysis.classes],
                "ids": analysis.ids,
                "type_selectors": analysis.type_selectors,
                "violations": [v.to_dict() for v in analysis.violations],
            }

            duration = time.time() - start_time
            log_tool_completion(tool_name, True, duration)

            return response

        except Exception as e:
            duration = time.time() - start_time
            error_msg = f"Selector analysis failed: {str(e)}"
            log_tool_completion(tool_name, False, duration, error_msg)
            raise ToolExecutionError(tool_name, error_msg)

    @mcp.tool()
    async def parse_class_name(class_name: str) -> Dict[str, Any]:
        """
        Split a class name into namespace, block, element and modifier.

        Args:
            class_name: Class name with or without the leading dot

        Returns:
            Dictionary with BEM parts and any naming error
        """
        start_time = time.time()
        tool_name = "parse_class_name"

        try:
            log_tool_execution(tool_name, {"class_name": class_name})

            analyzer = SelectorAnalyzer(config.rules)
            response = analyzer.parse_class_name(class_name).to_dict()

            duration = time.time() - start_time
            log_tool_completion(tool_name, True, duration)

            return response

        except Exception as e:
            duration = time.time() - start_time
            error_msg = f"Class name parsing failed: {str(e)}"
            log_tool_completion(tool_name, False, duration, error_msg)
            raise ToolExecutionError(tool_name, error_msg)

    @mcp.tool()
    async def check_declaration_order(
        items: Annotated[
            List[str],
            Field(
                description="Rule contents in source order: property names, at-rule statements "
                "such as '@include font-size(14px)', or nested selectors such as '&:hover'. "
                "Write nested tag selectors with '&' or a combinator ('& p', '> li'); "
                "a bare word is read as a property name.",
            ),
        ],
    ) -> Dict[str, Any]:
        """
        Check that rule contents follow the prescribed group ordering.

        Args:
            items: Property names, at-rules and nested selectors in source order

        Returns:
            Dictionary with the group of each item and ordering violations
        """
        start_time = time.time()
        tool_name = "check_declaration_order"

        try:
            log_tool_execution(tool_name, {"item_count": len(items)})

            checker = DeclarationOrderChecker(config.rules, config.validators.strict_mode)
            violations = checker.check_order(items) + checker.check_duplicates(items)

            response = {
                "valid": not violations,
                "items": checker.describe(items),
                "violations": [v.to_dict() for v in violations],
            }

            duration = time.time() - start_time
            log_tool_completion(tool_name, True, duration)

            return response

        except Exception as e:
            duration = time.time() - start_time
            error_msg = f"Declaration order check failed: {str(e)}"
            log_tool_completion(tool_name, False, duration, error_msg)
            raise ToolExecutionError(tool_name, error_msg)

    @mcp.tool()
    async def list_style_rules() -> Dict[str, Any]:
        """
        List the style-guide rules with their effective severities.

        Returns:
            Dictionary with the rule catalogue
        """
        tool_name = "list_style_rules"
        start_time = time.time()

        try:
            log_tool_execution(tool_name, {})
            rules = describe_rules(config.rules)
            response = {
                "rules": rules,
                "namespaces": config.rules.namespaces,
                "max_nesting_depth": config.rules.max_nesting_depth,
            }
            log_tool_completion(tool_name, True, time.time() - start_time)
            return response

        except Exception as e:
            error_msg = f"Listing rules failed: {str(e)}"
            log_tool_completion(tool_name, False, time.time() - start_time, error_msg)
            raise ToolExecutionError(tool_name, error_msg)

    logger.info(
        "Registered analysis tools: analyze_selector, parse_class_name, "
        "check_declaration_order, list_style_rules"
    )
