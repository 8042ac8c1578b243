"""CLI command implementations.

Each function implements a subcommand (export, config, clear-logs) and
returns the process exit code.
"""

import json

import httpx
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from board_extract.config import CONFIG_FILE, ConfigError, ExtractConfig, atomic_write
from board_extract.monday.api_logging import clear_logs, get_log_directory, is_api_logging_enabled
from board_extract.monday.client import MondayClient
from board_extract.monday.models import ExtractionResult
from board_extract.monday.traversal import BoardExtractor, BoardNotFoundError, GraphQLError

console = Console()


def run_extraction(config: ExtractConfig, **client_kwargs) -> ExtractionResult:
    """Extract the configured board.

    Errors from the API or from decoding propagate unchanged; nothing is
    returned for a partially read board.
    """
    config.validate()
    with MondayClient(config.api_url, config.api_key, timeout=config.timeout, **client_kwargs) as client:
        extractor = BoardExtractor(client, config.board_id, page_limit=config.page_limit)
        return extractor.run()


def cmd_export(config: ExtractConfig, *, to_stdout: bool = False, debug: bool = False) -> int:
    """Extract a board and write it as a JSON array.

    Args:
        config: Effective configuration (CLI overrides already applied)
        to_stdout: Print the JSON instead of writing <output_dir>/<board_id>.json
        debug: Re-raise errors instead of reporting them

    Returns:
        Exit code (0 for success)
    """
    try:
        result = run_extraction(config)
        payload = json.dumps(result.records)

        if to_stdout:
            print(payload)
            return 0

        output_path = config.output_path
        atomic_write(output_path, payload.encode("utf-8"))
    except ConfigError as e:
        console.print(f"[red]Error:[/] {e}")
        console.print("[dim]Set them in .env, the environment, or ~/.board-extract/config.toml[/]")
        return 1
    except (
        httpx.HTTPError,
        BoardNotFoundError,
        GraphQLError,
        json.JSONDecodeError,
        # Unexpected response shapes and unwritable output paths
        KeyError,
        TypeError,
        OSError,
    ) as e:
        if debug:
            raise
        console.print(f"[red]Extraction failed:[/] {type(e).__name__}: {e}")
        return 1

    console.print(Panel(f"[bold blue]board-extract export[/] {result.board_name or config.board_id}", expand=False))
    _print_group_summary(result)
    console.print(f"\n[green]✓[/] Wrote {len(result.records)} records to {output_path}")
    return 0


def cmd_config(config: ExtractConfig) -> int:
    """Show the effective configuration."""
    console.print(Panel("[bold blue]board-extract config[/]", expand=False))

    not_set = "[dim](not set)[/]"
    table = Table(title="Configuration")
    table.add_column("Key", style="cyan")
    table.add_column("Value")

    table.add_row("api_url", config.api_url or not_set)
    table.add_row("api_key", config.masked_api_key or not_set)
    table.add_row("board_id", config.board_id or not_set)
    table.add_row("output_dir", config.output_dir)
    table.add_row("page_limit", str(config.page_limit))
    table.add_row("timeout", f"{config.timeout:g}s")

    console.print()
    console.print(table)

    console.print()
    api_log = f"on ({get_log_directory()})" if is_api_logging_enabled() else "off"
    console.print(f"[dim]API logging: {api_log}[/]")
    console.print(f"[dim]Config file: {CONFIG_FILE}[/]")
    return 0


def cmd_clear_logs() -> int:
    """Delete captured API request/response files."""
    count = clear_logs()
    console.print(f"[green]✓[/] Removed {count} log files from {get_log_directory()}")
    return 0


def _print_group_summary(result: ExtractionResult) -> None:
    table = Table(title="Records by group")
    table.add_column("Group", style="cyan")
    table.add_column("Records", justify="right")

    for group, count in result.counts_by_group().items():
        table.add_row(group, str(count))

    table.add_row("─" * 20, "─" * 7)
    table.add_row("[bold]Total[/]", f"[bold]{len(result.records)}[/]")

    console.print(table)
    console.print(f"[dim]Pages fetched: {result.pages_fetched}[/]")
