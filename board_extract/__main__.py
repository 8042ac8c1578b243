"""CLI entry point for board-extract.

Usage:
    python -m board_extract export                  # Board from BOARD_ID, written to data/<id>.json
    python -m board_extract export --board-id 123   # Override the board
    python -m board_extract export --stdout         # Print the JSON array instead
    python -m board_extract config                  # Show effective configuration
    python -m board_extract clear-logs              # Delete captured API traffic

Or via the installed command:
    board-extract export
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path

from dotenv import find_dotenv, load_dotenv
from rich.console import Console
from rich.logging import RichHandler

from board_extract._version import get_full_version_string
from board_extract.config import ConfigError, load_config
from board_extract.monday.commands import cmd_clear_logs, cmd_config, cmd_export, console


def configure_logging(verbose: bool = False, debug: bool = False) -> None:
    """Route log records through rich on stderr, at LOG_LEVEL unless a flag overrides it."""
    if debug:
        level = "DEBUG"
    elif verbose:
        level = "INFO"
    else:
        level = os.environ.get("LOG_LEVEL", "WARNING").upper()

    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), rich_tracebacks=True)],
        force=True,
    )
    # httpx logs every request at INFO
    if level != "DEBUG":
        logging.getLogger("httpx").setLevel(logging.WARNING)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="board-extract",
        description="Export every item of a monday.com board as flat JSON records",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""\
Environment (a .env file in the working directory is loaded first):
  API_URL      GraphQL endpoint (default: https://api.monday.com/v2)
  API_KEY      API token, sent verbatim as the Authorization header
  BOARD_ID     Board to export
  OUTPUT_DIR   Directory for <board_id>.json (default: data)
  PAGE_LIMIT   Items per page (default: 25)

Configuration file ~/.board-extract/config.toml:
    [monday]
    api_key = "..."
    board_id = "1234567890"
""",
    )
    parser.add_argument("--version", action="version", version=get_full_version_string())
    parser.add_argument("--config", type=Path, default=None, help="Path to a TOML config file")
    parser.add_argument("--verbose", "-v", action="store_true", help="Log progress")
    parser.add_argument("--debug", action="store_true", help="Debug logging; show tracebacks")

    subparsers = parser.add_subparsers(dest="command", required=True)

    export_parser = subparsers.add_parser("export", help="Extract a board to JSON")
    export_parser.add_argument("--board-id", "-b", default=None, help="Board id (overrides BOARD_ID)")
    export_parser.add_argument(
        "--output-dir",
        "-o",
        default=None,
        help="Output directory (overrides OUTPUT_DIR)",
    )
    export_parser.add_argument(
        "--page-limit",
        type=int,
        default=None,
        help="Items requested per page (overrides PAGE_LIMIT)",
    )
    export_parser.add_argument(
        "--stdout",
        action="store_true",
        help="Print the JSON array instead of writing a file",
    )

    subparsers.add_parser("config", help="Show the effective configuration")
    subparsers.add_parser("clear-logs", help="Delete captured API request/response files")

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the CLI.

    Args:
        argv: Command line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    load_dotenv(find_dotenv(usecwd=True))
    configure_logging(verbose=args.verbose, debug=args.debug)

    if args.command == "clear-logs":
        return cmd_clear_logs()

    try:
        config = load_config(args.config)
    except ConfigError as e:
        console.print(f"[red]Error:[/] {e}")
        return 1

    if args.command == "config":
        return cmd_config(config)

    config = config.with_overrides(
        board_id=args.board_id,
        output_dir=args.output_dir,
        page_limit=args.page_limit,
    )
    return cmd_export(config, to_stdout=args.stdout, debug=args.debug)


if __name__ == "__main__":
    sys.exit(main())
