"""CLI entry point for keyrank."""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any

from .config import load_config
from .search import KeySpec, search
from .tui import format_item, run_tui

logger = logging.getLogger(__name__)


class ItemsError(ValueError):
    """Raised when items cannot be read or decoded."""


HELP_EPILOG = """\
Input formats:
  JSON array         [{"name": "Node A"}, ...]
  JSON Lines         one JSON value per line
  Plain text         one string item per line

Examples:
  keyrank nd -f nodes.json                 Rank by 'name'
  keyrank nd -f nodes.json -k name:2 -k tags
  ls | keyrank cfg                          Rank plain lines
  keyrank nd -f nodes.json -i              Pick interactively
"""


def parse_items(text: str) -> list[Any]:
    """Decode items from a JSON array, JSON Lines or plain text lines."""
    stripped = text.strip()
    if not stripped:
        return []

    lines = [line for line in stripped.splitlines() if line.strip()]

    if stripped[0] in "[{":
        try:
            data = json.loads(stripped)
        except json.JSONDecodeError:
            pass
        else:
            if isinstance(data, list):
                return data

        try:
            return [json.loads(line) for line in lines]
        except json.JSONDecodeError:
            logger.debug("Input is not JSON, reading plain lines")

    return lines


def load_items(path: str | None) -> list[Any]:
    """Read items from path, or stdin when path is None or '-'."""
    if path is None or path == "-":
        return parse_items(sys.stdin.read())

    try:
        text = Path(path).read_text(encoding="utf-8")
    except OSError as e:
        raise ItemsError(f"Cannot read {path}: {e.strerror or e}") from e
    return parse_items(text)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Rank items against a query by fuzzy matching",
        prog="keyrank",
        epilog=HELP_EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "query",
        nargs="?",
        default="",
        help="Query string",
    )
    parser.add_argument(
        "-f", "--file",
        metavar="FILE",
        help="Items file (default: stdin)",
    )
    parser.add_argument(
        "-k", "--key",
        metavar="PATH[:WEIGHT]",
        action="append",
        dest="keys",
        help="Field to search, repeatable (default from config, else 'name')",
    )
    parser.add_argument(
        "-n", "--limit",
        type=int,
        metavar="N",
        help="Maximum number of results",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        dest="as_json",
        help="Print results as JSON",
    )
    parser.add_argument(
        "--scores",
        action="store_true",
        help="Prefix each result with its score",
    )
    parser.add_argument(
        "-i", "--interactive",
        action="store_true",
        help="Pick a result in the TUI",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    config = load_config(Path.cwd())

    try:
        keys = [KeySpec.parse(k) for k in args.keys] if args.keys else config.search.keys
        items = load_items(args.file)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    limit = args.limit if args.limit is not None else config.search.limit
    if limit < 0:
        print("Error: --limit must not be negative", file=sys.stderr)
        return 2

    # Handle --interactive
    if args.interactive:
        return handle_interactive(items, keys, config, args.query)

    if not args.query:
        print("Error: query required (or use -i)", file=sys.stderr)
        return 2

    results = search(args.query, items, keys, limit=limit or None)
    if not results:
        print("No matches", file=sys.stderr)
        return 1

    if args.as_json:
        payload = [{"score": r.score, "item": r.item} for r in results]
        print(json.dumps(payload, ensure_ascii=False, default=str))
        return 0

    for result in results:
        line = format_item(result.item)
        if args.scores:
            line = f"{result.score:g}\t{line}"
        print(line)
    return 0


def handle_interactive(items: list[Any], keys: list[KeySpec], config, query: str) -> int:
    """Run the picker and print the chosen item."""
    selected = run_tui(items, keys, config, query)
    if selected is None:
        return 1

    print(format_item(selected))
    return 0
