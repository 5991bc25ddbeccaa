"""Output formatters for yarnlock results."""

import json
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

from rich.console import Console
from rich.table import Table
from rich.panel import Panel

from ..core.detector import DetectionResult
from ..core.parsers import YarnLockFile
from ..utils.logging import get_logger


class ConsoleFormatter:
    """Rich console formatter for yarnlock output."""

    def __init__(self, console: Optional[Console] = None) -> None:
        """Initialize the console formatter.

        Args:
            console: Rich console instance
        """
        self.console = console or Console()
        self.logger = get_logger("ConsoleFormatter")

    def format_lock_file(self, result: DetectionResult) -> None:
        """Display the entries of one lock file.

        Args:
            result: Detection result for the lock file
        """
        if result.lock_file is None:
            self.format_error(f"Could not parse {result.location}", result.error)
            return

        self.console.print(self._create_entries_table(result.location, result.lock_file))

        if result.recorder.has_failures:
            failed = "\n".join(f"• {name}" for name in result.recorder.failed_packages)
            self.console.print(Panel(failed, title="Entries without a version", style="yellow"))

    def _create_entries_table(self, location: Path, lock_file: YarnLockFile) -> Table:
        """Create the entries table.

        Args:
            location: Lock file path, used in the title
            lock_file: Parsed lock file

        Returns:
            Rich table with one row per entry
        """
        table = Table(title=f"{location} ({lock_file.lock_version.value})")
        table.add_column("Package", style="cyan")
        table.add_column("Version", style="green")
        table.add_column("Satisfies")
        table.add_column("Deps", justify="right")
        table.add_column("Optional", justify="right")

        for entry in lock_file.entries:
            table.add_row(
                entry.name,
                entry.version,
                ", ".join(sorted(entry.satisfied)),
                str(len(entry.dependencies)),
                str(len(entry.optional_dependencies)),
            )

        return table

    def format_scan_summary(self, results: List[DetectionResult], scan_time: float) -> None:
        """Display totals for a scan.

        Args:
            results: Detection results of every lock file
            scan_time: Time taken for scan in seconds
        """
        parsed = [result for result in results if result.lock_file is not None]
        total_entries = sum(len(result.lock_file.entries) for result in parsed)
        total_failures = sum(len(result.recorder.failed_packages) for result in results)

        summary_text = (
            f"Lock files found: {len(results)}\n"
            f"Lock files parsed: {len(parsed)}\n"
            f"Entries: {total_entries}\n"
            f"Entries without a version: {total_failures}\n"
            f"Scan time: {scan_time:.2f}s"
        )

        style = "green" if len(parsed) == len(results) and not total_failures else "yellow"
        self.console.print(Panel(summary_text, title="Scan Summary", style=style))

        for result in results:
            if result.lock_file is None:
                self.console.print(f"  ✗ {result.location}: {result.error}")
            else:
                self.console.print(f"  ✓ {result.location} ({len(result.lock_file.entries)} entries)")

    def format_error(self, error: str, details: Optional[str] = None) -> None:
        """Format and display error message.

        Args:
            error: Error message
            details: Optional error details
        """
        message = error if not details else f"{error}\n\n{details}"
        self.console.print(Panel(message, title="Error", style="red"))


class JSONFormatter:
    """JSON formatter for yarnlock output."""

    def __init__(self, output_file: Optional[Path] = None) -> None:
        """Initialize the JSON formatter.

        Args:
            output_file: Optional output file path
        """
        self.output_file = output_file
        self.logger = get_logger("JSONFormatter")

    def format_lock_file(self, lock_file: YarnLockFile) -> Dict[str, Any]:
        """Format one lock file as JSON.

        Args:
            lock_file: Parsed lock file

        Returns:
            Lock version plus entries in source order
        """
        return {
            "lockVersion": lock_file.lock_version.value,
            "entries": [entry.to_dict() for entry in lock_file.entries],
        }

    def format_result(self, result: DetectionResult) -> Dict[str, Any]:
        return {
            "location": str(result.location),
            "lockFile": self.format_lock_file(result.lock_file) if result.lock_file else None,
            "failedPackages": list(result.recorder.failed_packages),
            "error": result.error,
        }

    def format_scan_results(
        self,
        results: List[DetectionResult],
        scan_time: float,
        metadata: Optional[Dict[str, Any]] = None
    ) -> Dict[str, Any]:
        """Format scan results as JSON.

        Args:
            results: Detection results of every lock file
            scan_time: Scan time in seconds
            metadata: Optional additional metadata

        Returns:
            Formatted JSON data
        """
        parsed = [result for result in results if result.lock_file is not None]

        result = {
            "scan_summary": {
                "lock_files": len(results),
                "parsed_lock_files": len(parsed),
                "total_entries": sum(len(item.lock_file.entries) for item in parsed),
                "failed_packages": sum(len(item.recorder.failed_packages) for item in results),
                "scan_time_seconds": scan_time,
                "timestamp": datetime.now().isoformat()
            },
            "lock_files": [self.format_result(item) for item in results]
        }

        if metadata:
            result["metadata"] = metadata

        return result

    def save_results(
        self,
        results: Dict[str, Any],
        output_file: Optional[Path] = None
    ) -> None:
        """Save results to JSON file.

        Args:
            results: Results dictionary
            output_file: Output file path (uses instance default if None)
        """
        file_path = output_file or self.output_file
        if not file_path:
            raise ValueError("No output file specified")

        try:
            with open(file_path, 'w', encoding='utf-8') as f:
                json.dump(results, f, indent=2, ensure_ascii=False)

            self.logger.info(f"Results saved to {file_path}")
        except IOError as e:
            self.logger.error(f"Failed to save results to {file_path}: {e}")
            raise
