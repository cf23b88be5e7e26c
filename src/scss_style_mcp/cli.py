"""Command-line linter for SCSS files."""

import argparse
import json
import sys
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from scss_style_mcp import __version__
from scss_style_mcp.config import load_config
from scss_style_mcp.tools.lint_tools import lint_result_to_dict
from scss_style_mcp.utils.errors import format_validation_errors
from scss_style_mcp.utils.logging_config import setup_logging, get_logger
from scss_style_mcp.validators.style_linter import StyleLinter, LintResult

STYLE_SUFFIXES = (".scss", ".css")

logger = get_logger("cli")


def collect_files(paths: Sequence[str]) -> List[Path]:
    """Expand directories into the stylesheets they contain."""
    files: List[Path] = []
    for raw in paths:
        path = Path(raw)
        if path.is_dir():
            files.extend(
                sorted(p for p in path.rglob("*") if p.is_file() and p.suffix in STYLE_SUFFIXES)
            )
        else:
            files.append(path)
    return files


def format_text(path: Path, result: LintResult) -> str:
    """Render a lint result for the terminal."""
    lines = [f"{path}: {result.summary}"]
    if result.errors:
        lines.append(_indent(format_validation_errors(result.errors)))
    if result.warnings:
        lines.append(_indent(format_validation_errors(result.warnings)))
    for suggestion in result.suggestions:
        lines.append(f"  suggestion: {suggestion}")
    return "\n".join(lines)


def _indent(text: str) -> str:
    return "\n".join(f"  {line}" for line in text.splitlines())


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Lint the given files and directories; return the process exit code."""
    parser = argparse.ArgumentParser(
        prog="scss-style-lint", description="Lint SCSS against the style guide"
    )
    parser.add_argument("paths", nargs="+", help="Files or directories to lint")
    parser.add_argument("--config", "-c", type=str, help="Path to configuration file")
    parser.add_argument(
        "--format", "-f", choices=["text", "json"], default="text", help="Output format"
    )
    parser.add_argument("--strict", action="store_true", help="Treat warnings as errors")
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level (overrides the configuration file)",
    )
    parser.add_argument("--version", action="version", version=__version__)

    args = parser.parse_args(argv)

    try:
        config = load_config(args.config)
    except ValueError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 2

    if args.log_level:
        config.logging.level = args.log_level
    elif "level" not in config.logging.model_fields_set:
        # Default for the command line when nothing was configured
        config.logging.level = "WARNING"
    config.logging.format = "text"
    setup_logging(config.logging)

    if args.strict:
        config.validators.strict_mode = True

    linter = StyleLinter(config.validators, config.rules, config.performance)
    files = collect_files(args.paths)
    logger.debug(f"Linting {len(files)} files")

    results: Dict[str, LintResult] = {}
    for path in files:
        results[str(path)] = linter.lint_file(str(path))

    if args.format == "json":
        payload = {name: lint_result_to_dict(result) for name, result in results.items()}
        print(json.dumps(payload, indent=2, ensure_ascii=False))
    else:
        for name, result in results.items():
            print(format_text(Path(name), result))

    return 0 if all(result.valid for result in results.values()) else 1


if __name__ == "__main__":
    sys.exit(main())
