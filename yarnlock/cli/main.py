"""Main CLI interface for yarnlock."""

import json
import time
from pathlib import Path
from typing import List, Optional
import typer
from rich.console import Console

from ..utils.logging import setup_logging, get_logger
from ..core.detector import YarnLockDetector
from ..core.parsers import ReaderConfig, YarnBlockReader
from ..output.formatters import ConsoleFormatter, JSONFormatter

app = typer.Typer(
    name="yarnlock",
    help="Read yarn lock files into package entries and dependency edges",
    add_completion=False
)

console = Console()
logger = get_logger("CLI")


def _build_detector(indent_width: int) -> YarnLockDetector:
    reader = YarnBlockReader(ReaderConfig(indent_width=indent_width))
    return YarnLockDetector(reader=reader)


@app.command()
def scan(
    path: Path = typer.Argument(
        Path("."),
        help="Project directory (or lock file) to scan"
    ),
    output: Optional[Path] = typer.Option(
        None,
        "--output",
        "-o",
        help="Output file for JSON results"
    ),
    ignore_patterns: Optional[List[str]] = typer.Option(
        None,
        "--ignore",
        help="Additional ignore patterns"
    ),
    indent_width: int = typer.Option(
        2,
        "--indent-width",
        min=1,
        help="Spaces per nesting level in the lock files"
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose logging"
    ),
    log_file: Optional[Path] = typer.Option(
        None,
        "--log-file",
        help="Also write log records to this file (or a timestamped file in this directory)"
    ),
) -> None:
    """Find and parse every yarn.lock below a path."""

    if not path.exists():
        console.print(f"[red]Error: Path does not exist: {path}[/red]")
        raise typer.Exit(1)

    try:
        setup_logging(verbose=verbose, log_file=log_file)
        detector = _build_detector(indent_width)

        console.print(f"Scanning for yarn.lock files in {path}...")
        start_time = time.perf_counter()
        results = detector.scan_directory(path, ignore_patterns)
        scan_time = time.perf_counter() - start_time

        if not results:
            console.print("[yellow]No yarn.lock files found[/yellow]")
            return

        ConsoleFormatter(console).format_scan_summary(results, scan_time)

        if output:
            json_formatter = JSONFormatter(output)
            json_formatter.save_results(json_formatter.format_scan_results(results, scan_time))
            console.print(f"Results saved to {output}")

    except Exception as e:
        logger.error(f"Scan failed: {e}")
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)


@app.command()
def show(
    lock_file: Path = typer.Argument(
        ...,
        help="Lock file to parse"
    ),
    as_json: bool = typer.Option(
        False,
        "--json",
        help="Print the entries as JSON"
    ),
    indent_width: int = typer.Option(
        2,
        "--indent-width",
        min=1,
        help="Spaces per nesting level in the lock file"
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose logging"
    ),
) -> None:
    """Parse one lock file and print its entries."""

    if not lock_file.is_file():
        console.print(f"[red]Error: Not a file: {lock_file}[/red]")
        raise typer.Exit(1)

    try:
        setup_logging(verbose=verbose)
        result = _build_detector(indent_width).scan_file(lock_file)

        if as_json:
            payload = JSONFormatter().format_result(result)
            typer.echo(json.dumps(payload, indent=2, ensure_ascii=False))
        else:
            ConsoleFormatter(console).format_lock_file(result)

    except Exception as e:
        logger.error(f"Show failed: {e}")
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    if not result.succeeded:
        raise typer.Exit(1)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
