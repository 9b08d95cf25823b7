"""Console output for the fsfacade CLI."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from rich.console import Console
from rich.table import Table


@dataclass
class EntryInfo:
    """One row of a directory listing."""

    name: str
    kind: str | None
    size: int
    permissions: str | None


class Display:
    """Text output for CLI commands."""

    def __init__(self, console: Console | None = None) -> None:
        """Initialize display.

        Args:
            console: Rich console to print to. Defaults to stdout.
        """
        self.console = console or Console()

    def show_success(self, message: str) -> None:
        """Show success message.

        Args:
            message: Success message.
        """
        self.console.print(f"[green]✓[/green] {message}")

    def show_error(self, message: str) -> None:
        """Show error message.

        Args:
            message: Error message.
        """
        self.console.print(f"[red]✗[/red] {message}")

    def show_warning(self, message: str) -> None:
        """Show warning message."""
        self.console.print(f"[yellow]![/yellow] {message}")

    def show_info(self, message: str) -> None:
        self.console.print(f"[blue]i[/blue] {message}")

    def show_raw(self, text: str) -> None:
        """Print text as-is, without markup or highlighting."""
        self.console.out(text, end="", highlight=False)

    def show_listing(self, path: str, entries: list[EntryInfo]) -> None:
        """Display a directory listing table.

        Args:
            path: Listed directory.
            entries: Rows to show.
        """
        if not entries:
            self.show_info(f"No entries in {path}")
            return

        table = Table(title=path)
        table.add_column("Name", style="cyan")
        table.add_column("Type")
        table.add_column("Size", justify="right")
        table.add_column("Mode")

        for entry in entries:
            table.add_row(
                entry.name,
                entry.kind or "?",
                str(entry.size),
                entry.permissions or "?",
            )

        self.console.print(table)

    def show_stat(self, path: str, fields: dict[str, object]) -> None:
        """Display stat fields for a path.

        Timestamps (int values of keys ending in "time") are shown as
        local date and time.
        """
        table = Table(title=path, show_header=False)
        table.add_column("Field", style="bold")
        table.add_column("Value")

        for key, value in fields.items():
            if key.endswith("time") and isinstance(value, int) and value > 0:
                value = datetime.fromtimestamp(value).strftime("%Y-%m-%d %H:%M:%S")
            table.add_row(key, "-" if value is None else str(value))

        self.console.print(table)
