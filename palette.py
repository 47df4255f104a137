#!/usr/bin/env python3
"""cmdpalette - Command palette search from the terminal.

Single entry point for trying the search engine headless.

Usage:
    python palette.py --commands commands.json --query "new"
    python palette.py --calc "2^10"
    python palette.py --status       # Show configuration issues
    python palette.py --version      # Show version
"""

import argparse
import json
import sys
from pathlib import Path
from typing import Callable, Optional

from cmdpalette import __version__
from cmdpalette.core.config import get_config, validate_config
from cmdpalette.core.exceptions import ValidationError
from cmdpalette.core.logging import get_logger, setup_logging
from cmdpalette.engine.calculator import evaluate_math_expression
from cmdpalette.engine.models import Command, SearchResults, command_from_dict
from cmdpalette.engine.recency import JsonFileRecentStore, RecencyCache
from cmdpalette.engine.registry import CommandRegistry
from cmdpalette.engine.search import search


def load_commands(path: Path) -> list[Command]:
    """Load command descriptors from a JSON array.

    Raises:
        ValidationError: If the file is not a JSON array of valid descriptors
    """
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise ValidationError(f"Cannot read commands from {path}: {e}") from e
    if not isinstance(data, list):
        raise ValidationError(f"{path} must contain a JSON array of commands")

    commands = []
    for item in data:
        if not isinstance(item, dict):
            raise ValidationError(f"{path}: every command must be an object")
        commands.append(command_from_dict(item, action=_announce(item.get("id"))))
    return commands


def _announce(command_id: object) -> Callable[[], None]:
    def action() -> None:
        print(f"Executed {command_id}")

    return action


def highlight(title: str, matches: list[int]) -> str:
    """Wrap matched title characters in brackets."""
    marked = set(matches)
    return "".join(f"[{ch}]" if i in marked else ch for i, ch in enumerate(title))


def format_results(results: SearchResults) -> str:
    """Render grouped results as plain text."""
    lines: list[str] = []
    index = 0
    if results.arithmetic_result is not None:
        lines.append(f"= {results.arithmetic_result}")
        index += 1
    for group in results.groups:
        lines.append(f"{group.category}:")
        for result in group.results:
            title = highlight(result.command.title, result.matches)
            lines.append(f"  {index:>3}  {title}  ({result.command.id}, {result.score:.3f})")
            index += 1
    if index == 0:
        lines.append("No results found")
    return "\n".join(lines)


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point.

    Returns:
        Exit code (0 = success, non-zero = error)
    """
    parser = argparse.ArgumentParser(description="cmdpalette - command palette search")
    parser.add_argument("--commands", type=Path, help="JSON file with command descriptors")
    parser.add_argument("--query", help="Search query to rank commands for")
    parser.add_argument("--calc", help="Evaluate an arithmetic expression")
    parser.add_argument("--status", action="store_true", help="Show configuration issues and exit")
    parser.add_argument("--version", action="store_true", help="Show version and exit")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")

    args = parser.parse_args(argv)

    if args.version:
        print(f"cmdpalette v{__version__}")
        return 0

    config = get_config()
    if args.debug or config.debug:
        import logging

        setup_logging(log_dir=config.log_path, console_level=logging.DEBUG)
    logger = get_logger("main")

    if args.status:
        issues = validate_config(config)
        print(f"\ncmdpalette v{__version__} - Configuration\n")
        print(f"  recent store: {config.recent_path}")
        print(f"  max recent:   {config.max_recent}")
        print(f"  shortcut:     {config.shortcut}")
        print(f"  alternate:    {config.alt_shortcut or '(none)'}")
        if issues:
            print(f"\nConfiguration issues ({len(issues)}):")
            for issue in issues:
                print(f"  ! {issue}")
        print()
        return 0

    if args.calc is not None:
        value = evaluate_math_expression(args.calc)
        print(value if value is not None else "no result")
        return 0

    commands: list[Command] = []
    if args.commands:
        try:
            commands = load_commands(args.commands)
        except ValidationError as e:
            logger.error(f"Invalid commands file: {e}")
            print(f"error: {e}", file=sys.stderr)
            return 1

    registry = CommandRegistry(commands)
    recency = RecencyCache(JsonFileRecentStore(config.recent_path), max_items=config.max_recent)
    results = search(args.query or "", registry, recency.ids())
    print(format_results(results))
    return 0


if __name__ == "__main__":
    sys.exit(main())
