"""Main CLI entry point for the simple-xml command-line tool.

Provides parse, find and validate commands over XML files.
"""

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from simple_xml_parser import __version__
from simple_xml_parser.api import XMLParser
from simple_xml_parser.shared import (
    ConfigError,
    ParserConfig,
    configure_logging,
    get_logger,
)
from simple_xml_parser.tree import ParseResult, XMLForest, XMLNode

PRESETS = {
    "default": ParserConfig,
    "strict": ParserConfig.strict,
    "lenient": ParserConfig.lenient,
}


def load_config(args: argparse.Namespace) -> ParserConfig:
    """Build the parser configuration from preset, config file and flags.

    Raises:
        ConfigError: If the config file is unreadable or invalid
    """
    config = PRESETS[args.preset]()
    if args.config:
        try:
            text = args.config.read_text(encoding="utf-8")
        except OSError as e:
            raise ConfigError(f"Cannot read config file {args.config}: {e}") from e
        config = ParserConfig.from_json(text, base=config)
    if args.keep_top_level_text:
        config = config.override(keep_top_level_text=True)
    return config


def parse_attr_filter(attr: Optional[str]) -> Optional[Tuple[str, Optional[str]]]:
    """Split a KEY or KEY=VALUE filter."""
    if attr is None:
        return None
    key, sep, value = attr.partition("=")
    return key, (value if sep else None)


def format_tree(nodes: List[XMLNode]) -> str:
    """Render nodes and their subtrees as an indented outline."""
    lines: List[str] = []
    stack = [(node, 0) for node in reversed(nodes)]
    while stack:
        node, depth = stack.pop()
        indent = "  " * depth
        if node.is_text:
            lines.append(f"{indent}{json.dumps(node.text_content)}")
            continue
        attrs = "".join(f' {key}="{value}"' for key, value in node.attributes.items())
        slash = "/" if node.is_self_closing else ""
        lines.append(f"{indent}<{node.name}{attrs}{slash}>")
        stack.extend((child, depth + 1) for child in reversed(node.children))
    return "\n".join(lines)


def format_nodes(nodes: List[XMLNode], format_type: str) -> str:
    """Format nodes for output."""
    if format_type == "tree":
        return format_tree(nodes)
    return json.dumps([node.to_dict() for node in nodes], indent=2)


def report_failure(path: Path, result: ParseResult) -> None:
    print(f"{path}: {result.error}", file=sys.stderr)


def cmd_parse(args: argparse.Namespace, config: ParserConfig) -> int:
    """Handle parse command."""
    result = XMLParser(config).parse_file(args.path)
    if not result.success:
        report_failure(args.path, result)
        return 1
    print(format_nodes(result.roots, args.format))
    return 0


def cmd_find(args: argparse.Namespace, config: ParserConfig) -> int:
    """Handle find command."""
    result = XMLParser(config).parse_file(args.path)
    if not result.success:
        report_failure(args.path, result)
        return 1

    attr_filter = parse_attr_filter(args.attr)

    def matches(node: XMLNode) -> bool:
        if node.is_text or (args.name is not None and node.name != args.name):
            return False
        if attr_filter is None:
            return True
        key, value = attr_filter
        return node.has_attribute(key) and (value is None or node.attributes[key] == value)

    forest: XMLForest = result.unwrap()
    found = forest.find_all(matches)
    print(format_nodes(found, args.format))
    return 0 if found else 1


def cmd_validate(args: argparse.Namespace, config: ParserConfig) -> int:
    """Handle validate command."""
    parser = XMLParser(config)
    results: List[Dict[str, Any]] = []
    for path in args.paths:
        result = parser.parse_file(path)
        entry: Dict[str, Any] = {"file": str(path), "valid": result.success}
        if result.error is not None:
            entry["error"] = result.error.to_dict()
        results.append(entry)

    if args.format == "json":
        print(json.dumps(results, indent=2))
    else:
        for entry in results:
            if entry["valid"]:
                print(f"OK    {entry['file']}")
            else:
                error = entry["error"]
                print(
                    f"FAIL  {entry['file']}: {error['kind']} at line {error['line']}, "
                    f"offset {error['offset']}: {error['message']}"
                )

    valid_count = sum(1 for entry in results if entry["valid"])
    return 0 if valid_count == len(results) else 1


def create_argument_parser() -> argparse.ArgumentParser:
    """Create the main argument parser."""
    parser = argparse.ArgumentParser(
        prog="simple-xml",
        description="Parse XML files into element/text trees and query them"
    )

    parser.add_argument("--version", action="version", version=__version__)

    # Options shared by every command
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--config", "-c",
        type=Path,
        help="JSON file with ParserConfig fields"
    )
    common.add_argument(
        "--preset",
        choices=sorted(PRESETS),
        default="default",
        help="Parser configuration preset (default: default)"
    )
    common.add_argument(
        "--keep-top-level-text",
        action="store_true",
        help="Keep text outside any element as top-level nodes"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Parse command
    parse_parser = subparsers.add_parser("parse", parents=[common], help="Parse an XML file")
    parse_parser.add_argument("path", type=Path, help="XML file to parse")
    parse_parser.add_argument(
        "--format", "-f",
        choices=["json", "tree"],
        default="json",
        help="Output format (default: json)"
    )

    # Find command
    find_parser = subparsers.add_parser(
        "find", parents=[common], help="Print elements matching a name or attribute"
    )
    find_parser.add_argument("path", type=Path, help="XML file to search")
    find_parser.add_argument("--name", "-n", help="Element name to match")
    find_parser.add_argument("--attr", "-a", help="Attribute KEY or KEY=VALUE to match")
    find_parser.add_argument(
        "--format", "-f",
        choices=["json", "tree"],
        default="tree",
        help="Output format (default: tree)"
    )

    # Validate command
    validate_parser = subparsers.add_parser(
        "validate", parents=[common], help="Check that XML files are well-formed"
    )
    validate_parser.add_argument("paths", nargs="+", type=Path, help="XML files to check")
    validate_parser.add_argument(
        "--format", "-f",
        choices=["json", "text"],
        default="text",
        help="Output format"
    )

    # Global options
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Verbose output"
    )
    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Quiet output"
    )

    return parser


COMMANDS = {
    "parse": cmd_parse,
    "find": cmd_find,
    "validate": cmd_validate,
}


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    try:
        config = load_config(args)
    except ConfigError as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        return 1

    # Set up logging verbosity
    if args.verbose:
        configure_logging("DEBUG")
    elif args.quiet:
        configure_logging("ERROR")
    else:
        configure_logging(config.logging_level)

    logger = get_logger(__name__, None, "cli")
    logger.debug("Running command", extra={"command": args.command})

    try:
        return COMMANDS[args.command](args, config)
    except KeyboardInterrupt:
        print("\nOperation interrupted by user", file=sys.stderr)
        return 130  # Standard exit code for SIGINT


if __name__ == "__main__":
    sys.exit(main())
